from wtforms.validators import ValidationError

from isbnkit.services.isbn import parse


class IsbnValidator:
    """WTForms validator accepting any code the range table can decompose.

    Empty/None data is accepted (use DataRequired for mandatory fields).
    With ``normalize_to`` set, ``field.data`` is rewritten in that format
    (e.g. 'ISBN-13') once the code is valid.
    """

    def __init__(self, message=None, normalize_to=None, ranges=None):
        self.message = message
        self.normalize_to = normalize_to
        self.ranges = ranges

    def __call__(self, form, field):
        data = field.data
        if data is None or not str(data).strip():
            return

        isbn = parse(str(data), ranges=self.ranges)
        if not isbn.is_valid():
            raise ValidationError(self.message or ' '.join(m for _, m in isbn.error_messages()))

        if self.normalize_to:
            field.data = isbn.format(self.normalize_to)


# WTForms-compatible wrapper (callable receiving form, field)
def validate_isbn_field(form, field):
    """WTForms validator wrapper for ISBN fields."""
    IsbnValidator()(form, field)
