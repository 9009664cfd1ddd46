"""Pytest configuration and shared fixtures for ROPM generator tests."""

import struct
import tempfile
import zlib
from pathlib import Path

import pytest

from ropm.config import AppConfig
from ropm.core.intake import parse_record


def make_png(width: int = 4, height: int = 2) -> bytes:
    """Build a small valid RGB PNG image."""
    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    # Each scanline starts with filter byte 0
    raw = b"".join(b"\x00" + b"\x00\x33\x66" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(raw))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def png_bytes():
    """A small valid PNG image."""
    return make_png()


@pytest.fixture
def base_dir(temp_dir):
    """A base directory with the entry page and both insignia images."""
    public = temp_dir / "public"
    assets = public / "assets"
    assets.mkdir(parents=True)
    (public / "index.html").write_text("<html><body>ROPM</body></html>", encoding="utf-8")
    (assets / "logo_pb.png").write_bytes(make_png())
    (assets / "logo_pmpb.png").write_bytes(make_png(2, 4))
    return temp_dir


@pytest.fixture
def config(base_dir):
    """Configuration pointing at the asset-equipped base directory."""
    return AppConfig(base_dir=base_dir)


@pytest.fixture
def bare_config(temp_dir):
    """Configuration pointing at an empty directory (no fonts, images or page)."""
    return AppConfig(base_dir=temp_dir)


@pytest.fixture
def minimal_payload():
    """A submission with one victim and nothing else."""
    return {
        "num_boletim": "0153",
        "data": "2024-03-05",
        "vitima_nome": "MARIA DA SILVA",
    }


@pytest.fixture
def full_payload():
    """A submission exercising every section of the report."""
    return {
        "unidade": "1º BPM",
        "ciop": "55821",
        "num_boletim": "153",
        "data": "2024-03-05",
        "hora": "22:40",
        "natureza": "Roubo a transeunte",
        "codigo_ocorrencia": "C-157",
        "endereco": "Rua das Trincheiras, 120",
        "cidade_bairro": "Centro / João Pessoa",
        "referencia": "Próximo à praça",
        "guarnicoes": [
            {
                "vtr": "1-1234",
                "comandante": "SGT ALVES",
                "motorista": "CB SOUZA",
                "patrulheiros": ["SD LIMA", "", "SD COSTA"],
            },
            {"vtr": "1-5678", "comandante": "TEN ROCHA", "patrulheiros": []},
        ],
        "vitima_nome": ["MARIA DA SILVA", "JOSÉ PEREIRA"],
        "vitima_mae": ["ANA DA SILVA"],
        "vitima_nasc": ["1990-01-15", "1985-07-30"],
        "vitima_tel": ["83 99999-0000", "83 98888-1111"],
        "acusado_nome": ["CARLOS SANTOS"],
        "acusado_alcunha": ["CARLINHOS"],
        "acusado_pele": ["PARDA"],
        "acusado_altura": ["1,75"],
        "acusado_marcas": ["TATUAGEM"],
        "acusado_marcas_desc": ["DRAGÃO NO BRAÇO ESQUERDO"],
        "testemunha_nome": "PEDRO OLIVEIRA",
        "arma_tipo": ["REVÓLVER"],
        "arma_modelo": ["TAURUS 85"],
        "arma_calibre": [".38"],
        "arma_serie": ["AB12345"],
        "cartucho_qtd": ["5"],
        "cartucho_calibre": [".38"],
        "cartucho_tipo": ["INTACTOS"],
        "obj_descricao": ["APARELHO CELULAR", "CARTEIRA"],
        "obj_qtd": ["", "2"],
        "historico": "A guarnição foi acionada via CIOP.\nChegando ao local, encontrou a vítima.",
        "ar_acusado_nome": "CARLOS SANTOS",
        "ar_infracao": "ROUBO",
        "ar_meios": "TÉCNICAS DE IMOBILIZAÇÃO",
        "ar_resultado": "ESCORIAÇÕES LEVES",
        "ar_testemunha1": "PEDRO OLIVEIRA",
        "entrega_data": "2024-03-06",
        "entrega_hora": "01:15",
        "entrega_recebedor": "DEL. MARTINS",
    }


@pytest.fixture
def full_record(full_payload):
    """The full submission parsed into an IncidentRecord."""
    return parse_record(full_payload)
