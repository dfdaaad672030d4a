import re
from dataclasses import dataclass, field
from datetime import date

ISO_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

RATING_FIELDS = ('q1_topic', 'q2_knowledge', 'q3_delivery', 'q4_time')

MIN_AGE = 1
MAX_AGE = 150


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list = field(default_factory=list)

    def as_dict(self):
        return {
            'is_valid': self.is_valid,
            'errors': [{'field': e.field, 'message': e.message} for e in self.errors],
        }


def _is_blank(value):
    return not isinstance(value, str) or value.strip() == ''


def validate_evaluator_info(info):
    """
    Check the evaluator block of a submission (name, age, address, date).

    Never raises; every problem is reported as a FieldError so the caller can
    return them all at once.
    """
    errors = []

    if _is_blank(info.get('name')):
        errors.append(FieldError('name', 'Nama penilai diperlukan'))

    age = info.get('age')
    if age is None or age == '':
        errors.append(FieldError('age', 'Umur diperlukan'))
    elif isinstance(age, bool) or not isinstance(age, int) or not MIN_AGE <= age <= MAX_AGE:
        errors.append(FieldError('age', 'Umur tidak sah'))

    if _is_blank(info.get('address')):
        errors.append(FieldError('address', 'Alamat diperlukan'))

    evaluation_date = info.get('date')
    if _is_blank(evaluation_date):
        errors.append(FieldError('date', 'Tarikh diperlukan'))
    elif not is_valid_date(evaluation_date):
        errors.append(FieldError('date', 'Format tarikh tidak sah'))

    return ValidationResult(is_valid=not errors, errors=errors)


def is_valid_date(value):
    """True for a YYYY-MM-DD string naming a real calendar date."""
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_rating(value):
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 4


def is_ratings_complete(ratings):
    return all(is_valid_rating(ratings.get(name)) for name in RATING_FIELDS)

