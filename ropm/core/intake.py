"""
Record intake for ROPM submissions.

Converts the raw submission (a JSON object, or a decoded HTML form) into an
IncidentRecord. This is the only place that knows the wire format: parallel
per-field lists are aligned by index here, once, and every later stage works
on per-entity rows.

Alignment rules:
- The primary list of a group (e.g. vitima_nome, arma_tipo) decides how many
  rows exist; every entry produces a row, even a blank one.
- Secondary lists shorter than the primary list yield "" for missing indices.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ropm.core.normalize import to_list, value_at
from ropm.models import (
    ACCUSED_WIRE_SUFFIXES,
    PERSON_NAME_SUFFIX,
    PERSON_WIRE_SUFFIXES,
    Cartridge,
    Handover,
    IncidentRecord,
    Person,
    PersonCategory,
    ResistanceReport,
    SeizedObject,
    Unit,
    Weapon,
    coerce_text,
)
from ropm.utils.exceptions import RecordError

logger = logging.getLogger(__name__)

# IncidentRecord scalar field -> wire key
INCIDENT_WIRE_KEYS: Dict[str, str] = {
    "unit": "unidade",
    "ciop": "ciop",
    "bulletin_number": "num_boletim",
    "date": "data",
    "time": "hora",
    "nature": "natureza",
    "occurrence_code": "codigo_ocorrencia",
    "address": "endereco",
    "city_district": "cidade_bairro",
    "reference": "referencia",
    "narrative": "historico",
}

WEAPON_WIRE_KEYS: Dict[str, str] = {
    "kind": "arma_tipo",
    "model": "arma_modelo",
    "caliber": "arma_calibre",
    "serial": "arma_serie",
}

CARTRIDGE_WIRE_KEYS: Dict[str, str] = {
    "quantity": "cartucho_qtd",
    "caliber": "cartucho_calibre",
    "kind": "cartucho_tipo",
}

OBJECT_WIRE_KEYS: Dict[str, str] = {
    "description": "obj_descricao",
    "quantity": "obj_qtd",
}

RESISTANCE_WIRE_KEYS: Dict[str, str] = {
    "accused_name": "ar_acusado_nome",
    "infraction": "ar_infracao",
    "means": "ar_meios",
    "outcome": "ar_resultado",
    "witness1": "ar_testemunha1",
    "witness2": "ar_testemunha2",
}

HANDOVER_WIRE_KEYS: Dict[str, str] = {
    "date": "entrega_data",
    "time": "entrega_hora",
    "receiver": "entrega_recebedor",
}

UNITS_KEY = "guarnicoes"

_BRACKET_KEY = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")


def _text(key: str, value: Any) -> str:
    """Coerce one wire value, naming the field on failure."""
    try:
        return coerce_text(value)
    except ValueError as e:
        raise RecordError(key, str(e), value) from e


def _scalar(payload: Mapping[str, Any], key: str) -> str:
    """Read a single-valued field. A repeated field contributes its first entry."""
    value = payload.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return _text(key, value)


def _aligned(payload: Mapping[str, Any], keys: Mapping[str, str], index: int) -> Dict[str, str]:
    """Values of several parallel wire lists at one index, keyed by field name."""
    return {
        field: _text(key, value_at(to_list(payload.get(key)), index))
        for field, key in keys.items()
    }


def _build_persons(payload: Mapping[str, Any]) -> List[Person]:
    persons = []
    for category in PersonCategory:
        prefix = category.prefix
        suffixes = dict(PERSON_WIRE_SUFFIXES)
        if category is PersonCategory.ACUSADO:
            suffixes.update(ACCUSED_WIRE_SUFFIXES)
        keys = {field: f"{prefix}{suffix}" for field, suffix in suffixes.items()}

        name_key = f"{prefix}{PERSON_NAME_SUFFIX}"
        for index, name in enumerate(to_list(payload.get(name_key))):
            persons.append(Person(
                category=category,
                sequence=index + 1,
                name=_text(name_key, name),
                **_aligned(payload, keys, index),
            ))
    return persons


def _build_units(payload: Mapping[str, Any]) -> List[Unit]:
    units = []
    for entry in to_list(payload.get(UNITS_KEY)):
        if not isinstance(entry, Mapping):
            continue
        vtr = _text(f"{UNITS_KEY}.vtr", entry.get("vtr"))
        commander = _text(f"{UNITS_KEY}.comandante", entry.get("comandante"))
        # Units without vehicle and commander are leftovers of empty form rows
        if not (vtr or commander):
            continue
        units.append(Unit(
            vtr=vtr,
            commander=commander,
            driver=_text(f"{UNITS_KEY}.motorista", entry.get("motorista")),
            patrol=[
                _text(f"{UNITS_KEY}.patrulheiros", member)
                for member in to_list(entry.get("patrulheiros"))
                if member
            ],
        ))
    return units


def _build_group(payload: Mapping[str, Any], model, keys: Mapping[str, str], primary: str) -> list:
    """One row per entry of the primary list, secondary lists aligned by index."""
    count = len(to_list(payload.get(keys[primary])))
    return [model(**_aligned(payload, keys, index)) for index in range(count)]


def parse_record(payload: Any) -> IncidentRecord:
    """
    Build an IncidentRecord from a decoded submission.

    Args:
        payload: The decoded request body (None is treated as an empty record)

    Returns:
        IncidentRecord with every group expanded into rows

    Raises:
        RecordError: If the body is not an object or a field holds a value
            with no text form
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise RecordError(reason="request body must be an object", value=payload)

    scalars = {field: _scalar(payload, key) for field, key in INCIDENT_WIRE_KEYS.items()}

    objects = _build_group(payload, SeizedObject, OBJECT_WIRE_KEYS, "description")
    objects = [
        obj if obj.quantity else obj.model_copy(update={"quantity": "1"})
        for obj in objects
    ]

    resistance: Optional[ResistanceReport] = None
    if _scalar(payload, RESISTANCE_WIRE_KEYS["accused_name"]):
        resistance = ResistanceReport(**{
            field: _scalar(payload, key) for field, key in RESISTANCE_WIRE_KEYS.items()
        })

    record = IncidentRecord(
        **scalars,
        units=_build_units(payload),
        persons=_build_persons(payload),
        weapons=_build_group(payload, Weapon, WEAPON_WIRE_KEYS, "kind"),
        cartridges=_build_group(payload, Cartridge, CARTRIDGE_WIRE_KEYS, "quantity"),
        objects=objects,
        resistance=resistance,
        handover=Handover(**{
            field: _scalar(payload, key) for field, key in HANDOVER_WIRE_KEYS.items()
        }),
    )

    logger.debug(
        "Parsed record %s: %d unit(s), %d person(s), seizures=%s",
        record.bulletin_number or "-",
        len(record.units),
        len(record.persons),
        record.has_seizures,
    )
    return record


def _set_path(target: Dict[str, Any], name: str, path: List[str], value: str) -> None:
    """Place one bracketed form value, e.g. guarnicoes[0][patrulheiros][]."""
    if not path:
        existing = target.get(name)
        if existing is None:
            target[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            target[name] = [existing, value]
        return

    head, rest = path[0], path[1:]
    if head == "" and not rest:
        target.setdefault(name, [])
        if not isinstance(target[name], list):
            target[name] = [target[name]]
        target[name].append(value)
        return

    container = target.setdefault(name, {})
    if not isinstance(container, dict):
        # Mixed plain and bracketed keys; the plain value loses
        container = target[name] = {}
    _set_path(container, head, rest, value)


def _dict_to_lists(node: Any) -> Any:
    """Turn dicts keyed only by integers into index-ordered lists."""
    if isinstance(node, dict):
        node = {key: _dict_to_lists(value) for key, value in node.items()}
        if node and all(key.isdigit() for key in node):
            return [node[key] for key in sorted(node, key=int)]
        return node
    if isinstance(node, list):
        return [_dict_to_lists(item) for item in node]
    return node


def unflatten_form(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Decode form pairs into the same shape as the JSON submission.

    Repeated keys become lists and bracket notation builds nested
    structures: ``guarnicoes[0][vtr]=1234`` and
    ``guarnicoes[0][patrulheiros][]=SD SILVA`` give
    ``{"guarnicoes": [{"vtr": "1234", "patrulheiros": ["SD SILVA"]}]}``.
    A trailing ``[]`` on a plain key (``vitima_nome[]``) is a list marker.
    """
    result: Dict[str, Any] = {}
    for key, value in items:
        match = _BRACKET_KEY.match(key)
        if not match:
            _set_path(result, key, [], value)
            continue
        name, brackets = match.groups()
        path = re.findall(r"\[([^\[\]]*)\]", brackets)
        _set_path(result, name, path, value)
    return _dict_to_lists(result)
