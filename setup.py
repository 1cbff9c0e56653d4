import setuptools

INSTALL_REQUIRES = [
    'numpy',
    'torch',
]
TEST_REQUIRES = [
    # testing and coverage
    'pytest', 'coverage', 'pytest-cov',
]

setuptools.setup(
    name='rlturns',
    version='0.1.0dev',
    packages=setuptools.find_packages(include=['rlturns', 'rlturns.*']),
    license='MIT License',
    long_description=open('README.md').read(),
    install_requires=INSTALL_REQUIRES,
    extras_require={
        'test': TEST_REQUIRES + INSTALL_REQUIRES,
    },

)
