"""Closed catalog of member facilities."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Facility(str, Enum):
    """Member facility. The value is the display name used on the wire."""

    PAKDI_CHUMPOL = "รพ.ภักดีชุมพล"
    SAP_YAI = "รพ.ซับใหญ่"
    BAMNET_NARONG = "รพ.บำเหน็จณรงค์"
    CHATTURAT = "รพ.จตุรัส"
    BAN_KHWAO = "รพ.บ้านเขว้า"
    CHAIYAPHUM_MUNICIPALITY = "เทศบาลเมืองชัยภูมิ"
    THEP_SATHIT = "รพ.เทพสถิต"
    KAENG_KHRO = "รพ.แก้งคร้อ"
    NONG_BUA_DAENG = "รพ.หนองบัวแดง"
    PHU_KHIEO = "รพ.ภูเขียวเฉลิมพระเกียรติ"
    KHON_SAN = "รพ.คอนสาร"
    CHAIYAPHUM = "รพ.ชัยภูมิ"
    NONG_BUA_RAWE = "รพ.หนองบัวระเหว"
    NOEN_SA_NGA = "รพ.เนินสง่า"
    BAN_THAEN = "รพ.บ้านแท่น"
    KHON_SAWAN = "รพ.คอนสวรรค์"
    KASET_SOMBUN = "รพ.เกษตรสมบูรณ์"
    SPECIAL_EDUCATION_CENTER = "ศูนย์การศึกษาพิเศษ"

    @classmethod
    def parse(cls, value: "str | Facility") -> "Facility":
        """
        Resolve a facility from its wire value or its member name.

        Args:
            value: Display name (e.g. "รพ.ชัยภูมิ"), member name (e.g. "CHAIYAPHUM")
                or an existing Facility

        Returns:
            Matching Facility

        Raises:
            ValueError: If the value names no known facility
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Facility identifier must be a string, got {type(value).__name__}")
        text = value.strip()
        try:
            return cls(text)
        except ValueError:
            pass
        member = cls.__members__.get(text.upper())
        if member is None:
            raise ValueError(f"Unknown facility: {value!r}")
        return member


HOME_FACILITY = Facility.CHAIYAPHUM


def parse_optional(value) -> Optional[Facility]:
    """Parse a slot value where None or an empty string means an empty slot."""
    if value is None or value == "":
        return None
    return Facility.parse(value)
