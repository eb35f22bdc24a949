LAZY_PREFIX = "_lazy_"


def lazy(fn):
    """
    A decorator for a property computed on first access, then cached in
    the instance.
    """
    attr_name = LAZY_PREFIX + fn.__name__

    @property
    def _lazyprop(self):
        try:
            return self.__dict__[attr_name]
        except KeyError:
            value = self.__dict__[attr_name] = fn(self)
            return value

    return _lazyprop


def set_lazy(self, attr, value):
    """
    Set <value> as the cached value of the <attr> lazy property.
    """
    self.__dict__[LAZY_PREFIX + attr] = value
