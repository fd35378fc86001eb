"""
applications/types.py
─────────────────────
Typed records embedded in an EnrollmentApplication as JSON.

StudentInfo – the applicant's personal details, address and indigenous status.
ParentInfo  – parent / guardian contact and consent.
FileRef     – one uploaded document (original name, storage path, MIME, size, label).

Each record serializes with ``to_dict()`` for the JSONField and is rebuilt with
``from_dict()``; unknown keys are ignored so older rows still load.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Optional


def _known(cls, data):
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass
class Address:
    house_no: str = ''
    street:   str = ''
    barangay: str = ''
    city:     str = ''
    province: str = ''
    country:  str = ''
    zip:      str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(**_known(cls, data))

    def __str__(self):
        parts = [self.house_no, self.street, self.barangay, self.city,
                 self.province, self.zip, self.country]
        return ', '.join(p for p in parts if p)


@dataclass
class Indigenous:
    belongs: Optional[bool] = None
    specify: str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(**_known(cls, data))


@dataclass
class StudentInfo:
    first_name:  str
    last_name:   str
    email:       str
    middle_name: str = ''
    birth_date:  Optional[date] = None
    birthplace:  str = ''
    gender:      str = ''
    religion:    str = ''
    age:         Optional[int] = None
    contact:     str = ''
    address:     Address = field(default_factory=Address)
    indigenous:  Indigenous = field(default_factory=Indigenous)

    GENDERS = ('male', 'female', 'other')

    @property
    def full_name(self):
        return ' '.join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    def to_dict(self):
        data = asdict(self)
        data['birth_date'] = self.birth_date.isoformat() if self.birth_date else None
        return data

    @classmethod
    def from_dict(cls, data):
        data = dict(data or {})
        birth_date = data.get('birth_date')
        if isinstance(birth_date, str) and birth_date:
            # Unparseable strings are kept; _clean_student reports them.
            try:
                data['birth_date'] = date.fromisoformat(birth_date)
            except ValueError:
                pass
        elif not birth_date:
            data['birth_date'] = None
        data['address'] = Address.from_dict(data.get('address'))
        data['indigenous'] = Indigenous.from_dict(data.get('indigenous'))
        data.setdefault('first_name', '')
        data.setdefault('last_name', '')
        data.setdefault('email', '')
        return cls(**_known(cls, data))


@dataclass
class ParentInfo:
    name:                str = ''
    relation:            str = ''
    contact:             str = ''
    consent:             bool = False
    lives_with:          bool = False
    father_name:         str = ''
    mother_maiden_name:  str = ''
    legal_guardian_name: str = ''
    guardian_contact:    str = ''

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**_known(cls, data))


@dataclass
class FileRef:
    original_name: str
    stored_name:   str
    mime:          str
    size:          int
    type:          str

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        return cls(**_known(cls, data))
