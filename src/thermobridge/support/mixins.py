def quote(val):
    return "'" + str(val) + "'" if val is not None else "None"


class StringerMixin:

    def __str__(self):
        """
        outputs the class name and the compared attributes in key sorted order
        """
        return self.__class__.__name__ + ':' + self._sorted_items_string()

    __repr__ = __str__

    def _sorted_items_string(self):
        return "{" + ", ".join([("'" + str(key)) + "'" + ": " + (quote(val))
                                for key, val in sorted(_compared_items(self).items())]) + "}"


class CommonEqualityMixin(object):
    """
    equality for value objects: same class and same attributes.
    Attributes named in `_equality_excludes` are not compared.
    """
    _equality_excludes = ()

    def __eq__(self, other):
        return hasattr(other, '__dict__') and isinstance(other, self.__class__) \
            and _compared_items(self) == _compared_items(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self.__class__, tuple(sorted(_compared_items(self).items()))))


def _compared_items(obj):
    excludes = getattr(obj, '_equality_excludes', ())
    return dict((k, v) for k, v in obj.__dict__.items() if k not in excludes)
