from functools import wraps


class KalkError(Exception):
    '''
    Base of all user-facing errors. First argument is the message.
    '''

    def __str__(self):
        return self.args[0] if self.args else type(self).__name__


class NotANumber(KalkError):
    pass


class UnknownToken(KalkError):
    pass


class StackUnderflow(KalkError):
    pass


class DivisionByZero(KalkError):
    pass


class DomainError(KalkError):
    pass


class UnknownKey(KalkError):
    pass


class UninitializedAnswer(KalkError):
    pass


# Python's math module raises where IEEE arithmetic would hand back nan/inf.
_TRANSLATIONS = (
    (ZeroDivisionError, DivisionByZero, 'Division by zero in {}'),
    (OverflowError, DomainError, 'Result of {} out of range'),
    (ValueError, DomainError, 'Math domain error in {}'),
)


def wrap_user_errors(name):
    '''
    Decorator that converts math exceptions to KalkErrors.

    Passes through KalkErrors. The original exception is chained.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except KalkError:
                raise
            except Exception as e:
                for caught, error, fmt in _TRANSLATIONS:
                    if isinstance(e, caught):
                        raise error(fmt.format(name)) from e
                raise
        return wrapper
    return decorator
