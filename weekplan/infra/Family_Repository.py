import logging
from pathlib import Path
from threading import Lock
from typing import List, Optional
from weekplan.domain.DietProfile import DietProfile
from weekplan.domain.Family import Family, MealScheduleTemplate, Member
from weekplan.infra.json_store import atomic_write, read_json
from weekplan.infra.paths import FAMILIES_FILENAME, TEMPLATES_FILENAME, data_file
from weekplan.utilities.constants import DEFAULT_TEMPLATE_NAME
from weekplan.utilities.exceptions import NotFound
from weekplan.utilities.validators import DietProfileInput, parse_payload, parse_schedule

logger = logging.getLogger(__name__)


class FamilyRepository:
    """Families, their members and meal schedule templates."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.families_file = data_file(FAMILIES_FILENAME, data_dir)
        self.templates_file = data_file(TEMPLATES_FILENAME, data_dir)
        self._lock = Lock()

    def _load_families(self) -> List[Family]:
        return [Family.from_dict(entry) for entry in read_json(self.families_file, [])]

    def get_family(self, family_id: str) -> Family:
        for family in self._load_families():
            if family.id == family_id:
                return family
        raise NotFound(f"Family {family_id} not found")

    def resolve_member(self, family_id: str, user_id: str) -> Optional[Member]:
        """Return the family member for a user, or None if the user is not in the family."""
        try:
            return self.get_family(family_id).find_member(user_id)
        except NotFound:
            return None

    def save_family(self, family: Family) -> Family:
        with self._lock:
            stored = [f for f in read_json(self.families_file, []) if f.get('id') != family.id]
            stored.append(family.to_dict())
            atomic_write(self.families_file, stored)
        return family

    def list_templates(self, family_id: Optional[str] = None) -> List[MealScheduleTemplate]:
        templates = [MealScheduleTemplate.from_dict(t) for t in read_json(self.templates_file, [])]
        return [t for t in templates if t.is_system or t.family_id == family_id]

    def get_template(self, template_id: str, family_id: Optional[str] = None) -> MealScheduleTemplate:
        for template in self.list_templates(family_id):
            if template.id == template_id:
                return template
        raise NotFound(f"Template {template_id} not found")

    def active_template(self, family: Family, template_id: Optional[str] = None) -> MealScheduleTemplate:
        """Requested template, else the family default, else the system default."""
        if template_id:
            return self.get_template(template_id, family.id)
        if family.default_template_id:
            try:
                return self.get_template(family.default_template_id, family.id)
            except NotFound:
                logger.warning("Default template %s of family %s is missing", family.default_template_id, family.id)
        for template in self.list_templates(family.id):
            if template.is_system and template.name == DEFAULT_TEMPLATE_NAME:
                return template
        raise NotFound("No meal schedule template found")

    def save_template(self, template: MealScheduleTemplate) -> MealScheduleTemplate:
        with self._lock:
            stored = [t for t in read_json(self.templates_file, []) if t.get('id') != template.id]
            stored.append(template.to_dict())
            atomic_write(self.templates_file, stored)
        return template

    def create_template(self, family_id: str, payload) -> MealScheduleTemplate:
        """Validate a schedule payload and store it as a family template."""
        data = parse_schedule(payload)
        template = MealScheduleTemplate(name=data.name, family_id=family_id,
                                        schedule=[item.model_dump() for item in data.schedule])
        self.save_template(template)
        logger.info("Template %s (%d slots) created for family %s", template.name, len(template.slots()), family_id)
        return template

    def update_diet_profile(self, family_id: str, payload) -> Family:
        data = parse_payload(DietProfileInput, payload)
        family = self.get_family(family_id)
        family.diet_profile = DietProfile(**data.model_dump())
        return self.save_family(family)
