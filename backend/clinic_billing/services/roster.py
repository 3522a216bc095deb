from __future__ import annotations

from typing import Iterable, Iterator

from clinic_billing.schemas.patient import PatientOut


class Roster:
    """In-memory view of every known patient.

    Only replaced wholesale from a store read; never merged into.
    """

    def __init__(self, patients: Iterable[PatientOut] = ()) -> None:
        self._patients: tuple[PatientOut, ...] = tuple(patients)

    def replace(self, patients: Iterable[PatientOut]) -> None:
        self._patients = tuple(patients)

    def contains(self, fullname: str, mobile: str) -> bool:
        return any(
            patient.fullname == fullname and patient.mobile == mobile
            for patient in self._patients
        )

    def snapshot(self) -> list[PatientOut]:
        return list(self._patients)

    def __len__(self) -> int:
        return len(self._patients)

    def __iter__(self) -> Iterator[PatientOut]:
        return iter(self._patients)


def is_duplicate(roster: Roster, fullname: str, mobile: str) -> bool:
    return roster.contains(fullname, mobile)
