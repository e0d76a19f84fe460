"""Fixed catalog of church departments a program can belong to."""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Department:
    code: str
    name: str
    color: str


DEPARTMENTS: List[Department] = [
    Department("ministerio-infantil-adolescente", "Ministerio Infantil y del Adolescente", "#FFD700"),
    Department("ministerio-juvenil", "Ministerio Juvenil", "#FF6B35"),
    Department("escuela-sabatica", "Escuela Sabática", "#87CEEB"),
    Department("ministerio-mujer", "Ministerio de la Mujer", "#9370DB"),
    Department("ministerio-familia", "Ministerio de la Familia", "#32CD32"),
    Department("ministerios-personales-evangelismo", "Ministerios Personales y Evangelismo", "#DC143C"),
    Department("mayordomia-cristiana", "Mayordomía Cristiana", "#8B4513"),
    Department("ministerio-salud-temperancia", "Ministerio de Salud y Temperancia", "#228B22"),
    Department("comunicacion", "Comunicación", "#4169E1"),
    Department("educacion", "Educación", "#FFD700"),
    Department("libertad-religiosa", "Libertad Religiosa", "#FFFFFF"),
    Department("ministerio-publicaciones", "Ministerio de Publicaciones", "#654321"),
    Department("ministerio-musica", "Ministerio de la Música", "#6B3AA0"),
    Department("servicios-comunidad", "Servicios a la Comunidad", "#FF8C00"),
    Department("club-conquistadores", "Club de Conquistadores", "#FFD700"),
    Department("club-aventureros", "Club de Aventureros", "#FF0000"),
]

_BY_CODE: Dict[str, Department] = {d.code: d for d in DEPARTMENTS}


def get_department(code: str) -> Optional[Department]:
    return _BY_CODE.get(code)


def is_valid_department(code: Optional[str]) -> bool:
    return bool(code) and code in _BY_CODE
