
import sys
from collections import namedtuple

RESERVED_NAMES = ("get", "items")


def tuple_itemgetter(i):
    def _tuple_itemgetter(obj):
        return tuple.__getitem__(obj, i)
    return _tuple_itemgetter


def namedarraytuple(typename, field_names):
    """
    Returns a new subclass of a namedtuple which exposes indexing / slicing
    reads applied to all contained objects, which must share indexing
    (__getitem__) behavior (e.g. numpy arrays or torch tensors).  Used for
    batches of transitions, where indexing the batch selects the same
    sample(s) from every field.  Read-only: turn data is never written by
    index.

    >>> SamplesCls = namedarraytuple('Samples', ['reward', 'terminal'])
    >>> s = SamplesCls(np.array([1., 0.5]), terminal=np.array([False, True]))
    >>> s.reward                    # fields accessible by name
    array([1. , 0.5])
    >>> s[1]                        # get location across all fields
    Samples(reward=0.5, terminal=True)
    >>> s.get(0)                    # regular tuple-indexing into field
    array([1. , 0.5])
    >>> 'terminal' in s             # check field name instead of object
    True
    """
    try:  # For pickling, get location where this function was called.
        module = sys._getframe(1).f_globals.get('__name__', '__main__')
    except (AttributeError, ValueError):
        module = None
    NtCls = namedtuple(typename, field_names, module=module)

    def __getitem__(self, loc):
        try:
            return type(self)(*(None if s is None else s[loc] for s in self))
        except IndexError as e:
            for j, s in enumerate(self):
                if s is None:
                    continue
                try:
                    _ = s[loc]
                except IndexError:
                    raise IndexError(f"Occured in {self.__class__} at field "
                        f"'{self._fields[j]}'.") from e
            raise

    __getitem__.__doc__ = (f"Return a new {typename} instance containing "
        "the selected index or slice from each field.")

    def __contains__(self, key):
        "Checks presence of field name (unlike tuple; like dict)."
        return key in self._fields

    def get(self, index):
        "Retrieve value as if indexing into regular tuple."
        return tuple.__getitem__(self, index)

    def items(self):
        "Iterate ordered (field_name, value) pairs (like OrderedDict)."
        for k, v in zip(self._fields, self):
            yield k, v

    for method in (__getitem__, get, items):
        method.__qualname__ = f'{typename}.{method.__name__}'

    arg_list = repr(NtCls._fields).replace("'", "")[1:-1]
    class_namespace = {
        '__doc__': f'{typename}({arg_list})',
        '__slots__': (),
        '__getitem__': __getitem__,
        '__contains__': __contains__,
        'get': get,
        'items': items,
    }

    for index, name in enumerate(NtCls._fields):
        if name in RESERVED_NAMES:
            raise ValueError(f"Disallowed field name: {name}.")
        itemgetter_object = tuple_itemgetter(index)
        doc = f'Alias for field number {index}'
        class_namespace[name] = property(itemgetter_object, doc=doc)

    result = type(typename, (NtCls,), class_namespace)
    result.__module__ = NtCls.__module__
    return result


def is_namedtuple(obj):
    """Heuristic, might be spoofed.  True for namedtuple and namedarraytuple
    instances alike."""
    return isinstance(obj, tuple) and hasattr(obj, "_fields") and \
        hasattr(obj, "_asdict")
