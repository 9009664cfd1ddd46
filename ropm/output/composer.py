"""
ROPM Generator - Report Composer

Turns an IncidentRecord into the document definition consumed by the PDF
renderer. Sections are emitted in a fixed order:

1. Header (insignia and title)
2. Incident data
3. Police units
4. Involved persons
5. Seizures (only when something was seized)
6. Narrative
7. Resistance report (only when filled in)
8. Handover receipt
9. Signature lines

Builders never fail on missing data: every absent value renders as an empty
field, and empty groups render a single placeholder row.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ropm.core.normalize import format_date
from ropm.models import IncidentRecord, Person, PersonCategory, Unit
from ropm.output.blocks import (
    PALE_GREY,
    PERSON_GREY,
    Node,
    cell,
    column_header,
    empty,
    field,
    fillers,
    grid_table,
    image,
    placeholder,
    section_header,
    sub_header,
)
from ropm.output.text_utils import upper
from ropm.utils.assets import LEFT_INSIGNIA, RIGHT_INSIGNIA, resolve_image

PAGE_MARGIN = 20
PAGE_BORDER_INSET = 10
NARRATIVE_MIN_HEIGHT = 120

INCIDENT_WIDTHS = ["15%", "15%", "20%", "15%", "15%", "20%"]
UNIT_WIDTHS = ["15%", "35%", "50%"]
PERSON_WIDTHS = ["10%", "25%", "15%", "15%", "15%", "20%"]
SEIZURE_WIDTHS = ["*", "*", "15%", "*"]
HANDOVER_WIDTHS = ["20%", "20%", "*"]

SIGNATURE_RULE = "_" * 44


class ReportComposer:
    """
    Builds the ROPM document definition.

    Each _build_* method returns the blocks of one section; compose()
    concatenates them in document order.
    """

    def __init__(self, asset_dirs: Sequence[Path] = ()):
        """
        Initialize the composer.

        Args:
            asset_dirs: Directories searched for the insignia images
        """
        self.asset_dirs = [Path(d) for d in asset_dirs]

    def compose(self, record: IncidentRecord) -> Dict[str, Any]:
        """
        Build the complete document definition for one record.

        Args:
            record: Normalized incident record

        Returns:
            Document definition (page setup plus content blocks)
        """
        return {
            "pageSize": "A4",
            "pageMargins": [PAGE_MARGIN] * 4,
            "pageBorder": {"inset": PAGE_BORDER_INSET, "lineWidth": 1, "color": "#000000"},
            "info": {
                "title": f"ROPM {record.bulletin_number}".strip(),
                "subject": "Registro de Ocorrência Policial Militar",
            },
            "content": self.build_sections(record),
        }

    def build_sections(self, record: IncidentRecord) -> List[Node]:
        """All content blocks of the report, in document order."""
        blocks: List[Node] = []
        blocks.extend(self._build_header())
        blocks.extend(self._build_incident_data(record))
        blocks.extend(self._build_units(record.units))
        blocks.extend(self._build_involved(
            [p for category in PersonCategory for p in record.persons_of(category)]
        ))
        blocks.extend(self._build_seizures(record))
        blocks.extend(self._build_narrative(record))
        blocks.extend(self._build_resistance(record))
        blocks.extend(self._build_handover(record))
        blocks.extend(self._build_signatures())
        return blocks

    def _build_header(self) -> List[Node]:
        rule_below = [False, False, False, True]
        title = {
            "stack": [
                {"text": "ESTADO DA PARAÍBA", "style": "HeaderSmall"},
                {"text": "POLÍCIA MILITAR", "style": "HeaderLarge"},
                {"text": "REGISTRO DE OCORRÊNCIA POLICIAL MILITAR", "style": "HeaderMedium"},
            ],
            "alignment": "center",
            "margin": [0, 5, 0, 0],
            "border": rule_below,
        }
        return [{
            "table": {
                "widths": [60, "*", 60],
                "body": [[
                    image(resolve_image(LEFT_INSIGNIA, self.asset_dirs), 50, rule_below),
                    title,
                    image(resolve_image(RIGHT_INSIGNIA, self.asset_dirs), 50, rule_below),
                ]],
            },
            "layout": "noBorders",
            "margin": [0, 0, 0, 5],
            "section": "header",
        }]

    def _build_incident_data(self, record: IncidentRecord) -> List[Node]:
        body = [
            section_header("1. DADOS DA OCORRÊNCIA", 6),
            [
                field("UNIDADE (OPM)", record.unit),
                field("Nº CIOP", record.ciop),
                field("BOLETIM Nº", record.bulletin_number),
                field("DATA", format_date(record.date)),
                field("HORA", record.time),
                field("CÓD. OCORRÊNCIA", "***" if record.nature else ""),
            ],
            [
                field("NATUREZA DA OCORRÊNCIA", record.nature, 4), *fillers(3),
                field("CÓDIGO", record.occurrence_code, 2), *fillers(1),
            ],
            [
                field("ENDEREÇO DO FATO", record.address, 3), *fillers(2),
                field("BAIRRO/CIDADE", record.city_district, 3), *fillers(2),
            ],
            [field("PONTO DE REFERÊNCIA", record.reference, 6), *fillers(5)],
        ]
        return [grid_table(INCIDENT_WIDTHS, body, section="incident")]

    def _build_units(self, units: List[Unit]) -> List[Node]:
        if not units:
            body = [
                section_header("2. GUARNIÇÃO POLICIAL", 1),
                [placeholder("Nenhuma guarnição informada.")],
            ]
            return [grid_table(["*"], body, section="units")]

        blocks = []
        for index, unit in enumerate(units):
            number = index + 1
            if index == 0:
                rows = [
                    section_header("2. GUARNIÇÃO POLICIAL", 3),
                    sub_header(f"GUARNIÇÃO {number}", 3),
                ]
            else:
                rows = [sub_header(f"GUARNIÇÃO {number} (APOIO)", 3)]

            rows.append([
                field("PREFIXO VTR", unit.vtr),
                field("COMANDANTE", unit.commander),
                field("MOTORISTA", unit.driver),
            ])
            rows.append([field("PATRULHEIROS / COMPONENTES", unit.patrol_line, 3), *fillers(2)])
            blocks.append(grid_table(UNIT_WIDTHS, rows, margin=(0, 0, 0, 2), section="units"))
        return blocks

    def _build_involved(self, persons: List[Person]) -> List[Node]:
        if not persons:
            body = [
                section_header("3. ENVOLVIDOS", 1),
                [placeholder("Nenhum envolvido registrado.")],
            ]
            return [grid_table(["*"], body, section="involved")]

        return [
            self._build_person(person, first=(index == 0))
            for index, person in enumerate(persons)
        ]

    def _build_person(self, person: Person, first: bool) -> Node:
        """One person block; the section title goes on the first block only."""
        rows = []
        if first:
            rows.append(section_header("3. ENVOLVIDOS", 6))

        rows.append([
            {
                "text": person.identity_label,
                "style": "PersonType",
                "fillColor": PERSON_GREY,
                "alignment": "center",
            },
            field("NOME COMPLETO", person.name, 3), *fillers(2),
            field("ALCUNHA (APELIDO)", person.alias, 2), *fillers(1),
        ])
        rows.append([field("NOME DA MÃE", person.mother, 6), *fillers(5)])
        rows.append([
            field("DATA NASC.", format_date(person.birth_date)),
            field("RG / ÓRGÃO", person.rg),
            field("CPF", person.cpf),
            field("CNH", person.cnh),
            field("TELEFONE", person.phone),
            field("PROFISSÃO", person.profession),
        ])
        rows.append([
            field("ENDEREÇO COMPLETO", person.address, 4), *fillers(3),
            field("PONTO DE REFERÊNCIA", person.reference, 2), *fillers(1),
        ])

        if person.is_accused:
            rows.append([
                field("PELE", person.skin),
                field("OLHOS", person.eyes),
                field("CABELO", person.hair),
                field("ALTURA", person.height),
                field("COMPLEIÇÃO", person.build, 2), empty(0),
            ])
            marks = f"{person.marks} - {person.marks_description}"
            rows.append([field("SINAIS / MARCAS / TATUAGENS", marks, 6), *fillers(5)])

        return grid_table(PERSON_WIDTHS, rows, margin=(0, 0, 0, 2), section="involved")

    def _build_seizures(self, record: IncidentRecord) -> List[Node]:
        if not record.has_seizures:
            return []

        rows = [section_header("4. APREENSÕES", 4)]

        if record.weapons:
            rows.append(sub_header("ARMA(S) DE FOGO APREENDIDA(S)", 4, fill=PALE_GREY))
            rows.append([
                column_header("TIPO"),
                column_header("MARCA/MODELO"),
                column_header("CALIBRE"),
                column_header("SÉRIE"),
            ])
            for weapon in record.weapons:
                rows.append([
                    cell(weapon.kind),
                    cell(weapon.model),
                    cell(weapon.caliber),
                    cell(weapon.serial),
                ])

        if record.cartridges:
            rows.append(sub_header("CARTUCHO(S) APREENDIDO(S)", 4, fill=PALE_GREY))
            rows.append([
                column_header("QTD"),
                column_header("CALIBRE"),
                column_header("TIPO", 2), empty(0),
            ])
            for cartridge in record.cartridges:
                rows.append([
                    cell(cartridge.quantity),
                    cell(cartridge.caliber),
                    cell(cartridge.kind, 2), empty(0),
                ])

        if record.objects:
            rows.append(sub_header("OUTRO(S) OBJETO(S) APREENDIDO(S)", 4, fill=PALE_GREY))
            rows.append([
                column_header("QTD"),
                column_header("DESCRIÇÃO DO MATERIAL", 3), *fillers(2),
            ])
            for obj in record.objects:
                rows.append([
                    cell(obj.quantity or "1"),
                    cell(obj.description, 3), *fillers(2),
                ])

        return [grid_table(SEIZURE_WIDTHS, rows, section="seizures")]

    def _build_narrative(self, record: IncidentRecord) -> List[Node]:
        body = [
            section_header("5. RELATO DA OCORRÊNCIA", 1),
            [{
                "text": upper(record.narrative),
                "style": "NarrativeText",
                "minHeight": NARRATIVE_MIN_HEIGHT,
            }],
        ]
        return [grid_table(["*"], body, section="narrative")]

    def _build_resistance(self, record: IncidentRecord) -> List[Node]:
        report = record.resistance
        if report is None or not report.accused_name:
            return []

        def bold(value: Optional[str]) -> Node:
            return {"text": upper(value), "bold": True}

        statement = [
            "No exercício legal de minha função policial, abordei e dei voz de prisão ao acusado ",
            bold(report.accused_name),
            ", por ter encontrado o mesmo em flagrante delito e/ou contravenção penal de ",
            bold(report.infraction),
            " e, porque o infrator não obedecesse, antes resistisse à prisão, foi necessário "
            "o uso da força através de ",
            bold(report.means),
            ", moderada e progressivamente, para vencer tal resistência, do que resultou: ",
            bold(report.outcome),
            ".",
        ]
        body = [
            section_header("AUTO DE RESISTÊNCIA À PRISÃO", 1, red=True),
            [{"text": statement, "style": "NarrativeText"}],
        ]
        witnesses = [[
            field("TESTEMUNHA 01 (AR)", report.witness1),
            field("TESTEMUNHA 02 (AR)", report.witness2),
        ]]
        return [
            grid_table(["*"], body, margin=(0, 0, 0, 0), section="resistance"),
            grid_table(["50%", "50%"], witnesses, margin=(0, 2, 0, 0), section="resistance"),
        ]

    def _build_handover(self, record: IncidentRecord) -> List[Node]:
        handover = record.handover
        body = [
            section_header("6. TERMO DE ENTREGA / RECEBIMENTO", 3),
            [
                field("DATA", format_date(handover.date)),
                field("HORA", handover.time),
                field("RECEBEDOR (DELEGADO/AGENTE)", handover.receiver),
            ],
        ]
        return [grid_table(HANDOVER_WIDTHS, body, margin=(0, 0, 0, 0), section="handover")]

    def _build_signatures(self) -> List[Node]:
        return [{
            "columns": [
                {"text": f"\n\n{SIGNATURE_RULE}\nASSINATURA DO CONDUTOR", "style": "Signature"},
                {"text": f"\n\n{SIGNATURE_RULE}\nASSINATURA DO RECEBEDOR", "style": "Signature"},
            ],
            "margin": [0, 20, 0, 0],
            "section": "signatures",
        }]
