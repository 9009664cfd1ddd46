"""
Pydantic data models for ROPM incident reports.

The submission arrives as a flat mapping of scalar-or-list fields keyed by
wire names. Intake (ropm.core.intake) turns it into the structured record
defined here: one row object per unit, person and seized item, with every
text field already normalized to a string.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from ropm.core.normalize import strip_accents


def coerce_text(value: Any) -> str:
    """
    Coerce a wire value to its display text.

    None becomes "", strings are kept and numbers become their decimal form.
    Anything else has no text form on the document.

    Raises:
        ValueError: For objects, lists, booleans and other value types
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValueError(f"unrenderable value type: {type(value).__name__}")
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"unrenderable value type: {type(value).__name__}")


Text = Annotated[str, BeforeValidator(coerce_text)]


class PersonCategory(str, Enum):
    """Kinds of involved persons, in document order."""
    VITIMA = "VÍTIMA"
    ACUSADO = "ACUSADO"
    TESTEMUNHA = "TESTEMUNHA"

    @property
    def label(self) -> str:
        """Display form used on the identity line."""
        return self.value

    @property
    def prefix(self) -> str:
        """Wire key prefix: the label without diacritics, lower-cased."""
        return strip_accents(self.value).lower()


# Person field -> wire suffix. The wire key is f"{category.prefix}{suffix}".
PERSON_NAME_SUFFIX = "_nome"

PERSON_WIRE_SUFFIXES: Dict[str, str] = {
    "alias": "_alcunha",
    "mother": "_mae",
    "birth_date": "_nasc",
    "rg": "_rg",
    "cpf": "_cpf",
    "cnh": "_cnh",
    "phone": "_tel",
    "profession": "_profissao",
    "address": "_endereco",
    "reference": "_referencia",
}

ACCUSED_WIRE_SUFFIXES: Dict[str, str] = {
    "skin": "_pele",
    "eyes": "_olhos",
    "hair": "_cabelo",
    "height": "_altura",
    "build": "_compleicao",
    "marks": "_marcas",
    "marks_description": "_marcas_desc",
}


class _Row(BaseModel):
    """Common configuration for record rows."""
    model_config = ConfigDict(frozen=True)


class Person(_Row):
    """One involved person (victim, accused or witness)."""
    category: PersonCategory = Field(..., description="Kind of involvement")
    sequence: int = Field(..., description="1-based position within the category", ge=1)
    name: Text = ""
    alias: Text = ""
    mother: Text = ""
    birth_date: Text = ""
    rg: Text = ""
    cpf: Text = ""
    cnh: Text = ""
    phone: Text = ""
    profession: Text = ""
    address: Text = ""
    reference: Text = ""
    # Physical description, only collected for the accused
    skin: Text = ""
    eyes: Text = ""
    hair: Text = ""
    height: Text = ""
    build: Text = ""
    marks: Text = ""
    marks_description: Text = ""

    @property
    def is_accused(self) -> bool:
        return self.category is PersonCategory.ACUSADO

    @property
    def identity_label(self) -> str:
        """Category label, a literal "0" and the sequence, e.g. 'VÍTIMA 01', 'VÍTIMA 010'."""
        return f"{self.category.label} 0{self.sequence}"


class Unit(_Row):
    """A police unit (guarnição) that attended the incident."""
    vtr: Text = Field("", description="Vehicle prefix")
    commander: Text = ""
    driver: Text = ""
    patrol: List[Text] = Field(default_factory=list, description="Patrol members")

    @property
    def patrol_line(self) -> str:
        """Patrol member names joined with ' / ', empty names skipped."""
        return " / ".join(member for member in self.patrol if member)


class Weapon(_Row):
    """A seized firearm."""
    kind: Text = ""
    model: Text = ""
    caliber: Text = ""
    serial: Text = ""


class Cartridge(_Row):
    """A batch of seized cartridges."""
    quantity: Text = ""
    caliber: Text = ""
    kind: Text = ""


class SeizedObject(_Row):
    """Any other seized object."""
    quantity: Text = "1"
    description: Text = ""


class ResistanceReport(_Row):
    """Auto de resistência: the accused resisted arrest."""
    accused_name: Text
    infraction: Text = ""
    means: Text = ""
    outcome: Text = ""
    witness1: Text = ""
    witness2: Text = ""


class Handover(_Row):
    """Handover of the occurrence to the receiving authority."""
    date: Text = ""
    time: Text = ""
    receiver: Text = ""


class IncidentRecord(_Row):
    """Complete, normalized incident submission."""
    unit: Text = ""
    ciop: Text = ""
    bulletin_number: Text = ""
    date: Text = ""
    time: Text = ""
    nature: Text = ""
    occurrence_code: Text = ""
    address: Text = ""
    city_district: Text = ""
    reference: Text = ""

    units: List[Unit] = Field(default_factory=list)
    persons: List[Person] = Field(default_factory=list)
    weapons: List[Weapon] = Field(default_factory=list)
    cartridges: List[Cartridge] = Field(default_factory=list)
    objects: List[SeizedObject] = Field(default_factory=list)

    narrative: Text = ""
    resistance: Optional[ResistanceReport] = None
    handover: Handover = Field(default_factory=Handover)

    @property
    def has_seizures(self) -> bool:
        return bool(self.weapons or self.cartridges or self.objects)

    def persons_of(self, category: PersonCategory) -> List[Person]:
        """Persons of one category, in submission order."""
        return [p for p in self.persons if p.category is category]

    @property
    def download_filename(self) -> str:
        return f"ROPM_{self.bulletin_number or 'Gerado'}.pdf"
