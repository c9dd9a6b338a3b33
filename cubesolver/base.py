class class_property:
    """
    Class-level lazy attribute: computed on first access, then stored on the class
    under attr_name so that later lookups are plain attribute reads.
    A returned list is frozen to a tuple.
    """

    def __init__(self, attr_name: str = None):
        self.attr_name = attr_name
        self.func = None

    def __call__(self, func):
        self.func = func
        self.attr_name = self.attr_name or func.__name__.upper()
        return self

    def __get__(self, obj, cls):
        if self.attr_name not in cls.__dict__:
            raw = self.func(cls)
            if isinstance(raw, list):
                raw = tuple(raw)
            setattr(cls, self.attr_name, raw)
        return cls.__dict__[self.attr_name]


class class_cache:
    """
    Memoize a function of (cls, *args) per class. The cache dict lives on the class,
    key defaults to the positional arguments.
    """

    def __init__(self, cache_name: str = None, key=None):
        self.cache_name = cache_name
        self.key_func = key
        self.func = None

    def __call__(self, func):
        self.func = func
        if self.cache_name is None:
            self.cache_name = f"_{func.__name__}_cache".upper()
        return self

    def __get__(self, obj, cls):
        cache = cls.__dict__.get(self.cache_name)
        if cache is None:
            cache = {}
            setattr(cls, self.cache_name, cache)

        def wrapper(*args):
            key = self.key_func(*args) if self.key_func else args
            if key not in cache:
                cache[key] = self.func(cls, *args)
            return cache[key]

        wrapper.cache = cache
        return wrapper
