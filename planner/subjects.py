"""SubjectManager – Anlegen, Bearbeiten und Löschen von Fächern."""

import logging
from typing import Any, Optional

from models.subject import Subject, SubjectExtra, SubjectKind
from models.timetable_config import TimetableConfig, new_uuid

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"name", "kind", "short_name", "teacher_name", "extra"}


class SubjectManager:
    """Fachkatalog mit eindeutigen Namen und Löschschutz für verwendete Fächer."""

    def __init__(self, config: TimetableConfig) -> None:
        self.config = config

    def get_all_subjects(self, include_activities: bool = True) -> list[Subject]:
        """Alle Fächer; ohne Aktivitäten für Listen in der Oberfläche."""
        if include_activities:
            return list(self.config.subjects)
        return [s for s in self.config.subjects if not s.is_activity]

    def get_subject(self, subject_uuid: str) -> Optional[Subject]:
        return self.config.subject_by_uuid(subject_uuid)

    def get_subject_uuid_by_name(self, name: str) -> Optional[str]:
        subject = self.config.subject_by_name(name)
        return subject.uuid if subject else None

    def get_subject_name_by_uuid(self, subject_uuid: str) -> Optional[str]:
        subject = self.config.subject_by_uuid(subject_uuid)
        return subject.name if subject else None

    def create_subject(
        self,
        name: str,
        kind: SubjectKind = SubjectKind.SUBJECT,
        short_name: Optional[str] = None,
        teacher_name: Optional[str] = None,
        outdoor: bool = False,
    ) -> Optional[str]:
        """Legt ein Fach an. Gibt die UUID zurück, None bei Namenskonflikt."""
        if self.config.subject_by_name(name) is not None:
            logger.info(f"create_subject abgelehnt: Fach '{name}' existiert bereits")
            return None
        subject = Subject(
            uuid=new_uuid(),
            name=name,
            kind=SubjectKind(kind),
            short_name=short_name,
            teacher_name=teacher_name,
            extra=SubjectExtra(outdoor=outdoor),
        )
        self.config.subjects.append(subject)
        logger.debug(f"create_subject: '{name}' ({subject.uuid})")
        return subject.uuid

    def edit_subject(self, subject_uuid: str, **changes: Any) -> bool:
        """Ändert Felder eines Fachs (name, kind, short_name, teacher_name, extra)."""
        index = next(
            (i for i, s in enumerate(self.config.subjects) if s.uuid == subject_uuid), None
        )
        if index is None:
            logger.info(f"edit_subject abgelehnt: Fach {subject_uuid} unbekannt")
            return False
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            logger.info(f"edit_subject abgelehnt: unbekannte Felder {sorted(unknown)}")
            return False
        new_name = changes.get("name")
        if new_name is not None:
            other = self.config.subject_by_name(new_name)
            if other is not None and other.uuid != subject_uuid:
                logger.info(f"edit_subject abgelehnt: Name '{new_name}' bereits vergeben")
                return False

        current = self.config.subjects[index]
        data = current.model_dump()
        data.update(changes)
        try:
            updated = Subject.model_validate(data)
        except ValueError as e:
            logger.info(f"edit_subject abgelehnt: {e}")
            return False
        self.config.subjects[index] = updated
        return True

    def is_in_use(self, subject_uuid: str) -> bool:
        """True wenn eine Stunde (regulär oder temporär) das Fach verwendet."""
        for schedule in self.config.schedules:
            if any(l.subject_uuid == subject_uuid for l in schedule.lessons):
                return True
        for temporary in self.config.temporary_schedules:
            if any(l.subject_uuid == subject_uuid for l in temporary.lessons):
                return True
        return False

    def delete_subject(self, subject_uuid: str) -> bool:
        """Löscht ein Fach, sofern es nirgends mehr verwendet wird."""
        subject = self.config.subject_by_uuid(subject_uuid)
        if subject is None:
            return False
        if self.is_in_use(subject_uuid):
            logger.info(f"delete_subject abgelehnt: '{subject.name}' wird noch verwendet")
            return False
        self.config.subjects.remove(subject)
        return True
