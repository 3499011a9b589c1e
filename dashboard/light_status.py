# light_status.py
#
# Comfort-band classification for a desk light reading:
# - Low    : lux < 150   (not enough light to work)
# - Ideal  : 150..600    (inclusive on both ends)
# - High   : lux > 600   (too bright, glare)
#
# Plus the gauge fraction (0..1000 lux -> 0..1) and the fixed Turkish
# guidance texts shown next to the reading.

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

LOW_LUX_THRESHOLD = 150.0
HIGH_LUX_THRESHOLD = 600.0
GAUGE_MAX_LUX = 1000.0


class LightCategory(Enum):
    LOW = "low"
    IDEAL = "ideal"
    HIGH = "high"


@dataclass(frozen=True)
class LightStatus:
    category: LightCategory
    message: str
    description: str
    accent_color: str
    text_color: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "category": self.category.value,
            "message": self.message,
            "description": self.description,
            "accent_color": self.accent_color,
            "text_color": self.text_color,
        }


LOW_STATUS = LightStatus(
    category=LightCategory.LOW,
    message="Ortam ışığı yetersiz",
    description="Daha iyi bir çalışma ortamı için ışığı artırın.",
    accent_color="#C56A67",  # reddish orange
    text_color="#C56A67",
)

IDEAL_STATUS = LightStatus(
    category=LightCategory.IDEAL,
    message="Ortam ışığı ideal",
    description="Göz konforu için mükemmel denge.",
    accent_color="#548D6F",  # green
    text_color="#548D6F",
)

HIGH_STATUS = LightStatus(
    category=LightCategory.HIGH,
    message="Ortam ışığı fazla parlak",
    description="Göz konforu için ışığı azaltmayı düşünün.",
    accent_color="#D4AF63",  # golden yellow
    text_color="#D4AF63",
)


RECOMMENDATIONS: Dict[LightCategory, Tuple[str, ...]] = {
    LightCategory.LOW: (
        "Işığı artırmak için pencereyi açın veya ek bir ışık kaynağı ekleyin",
        "Göz yorgunluğunu önlemek için yeterli aydınlatma önemlidir",
        "Çalışma masanızı daha aydınlık bir alana taşımayı düşünün",
    ),
    LightCategory.IDEAL: (
        "Mevcut aydınlatma seviyeniz idealdir",
        "Bu seviyeyi korumaya çalışın",
        "Düzenli olarak ışık seviyesini kontrol edin",
    ),
    LightCategory.HIGH: (
        "Işığı azaltmak için perdeleri kapatın veya ışık kaynaklarını kapatın",
        "Çok parlak ışık göz yorgunluğuna neden olabilir",
        "Çalışma masanızı daha az aydınlık bir alana taşımayı düşünün",
    ),
}

INFO_TITLE = "LUXON - Smart Light Assistant"

INFO_TEXT = (
    "LUXON, çalışma ortamınızdaki ışık seviyesini ölçerek göz sağlığınızı korumanıza yardımcı olur.\n\n"
    "İdeal ışık seviyeleri:\n"
    "• Çalışma için: 300-500 lux\n"
    "• Yetersiz: 150 lux altı\n"
    "• Çok parlak: 600 lux üstü\n\n"
    "Uygulama, cihazınızın ışık sensörünü kullanarak gerçek zamanlı ölçüm yapar."
)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def classify(lux: float) -> LightStatus:
    """Map a lux reading to its comfort band. Never raises; negatives are Low."""
    if lux < LOW_LUX_THRESHOLD:
        return LOW_STATUS
    if lux > HIGH_LUX_THRESHOLD:
        return HIGH_STATUS
    return IDEAL_STATUS


def calculate_progress(lux: float) -> float:
    """Gauge fraction: 0..1000 lux mapped onto 0..1, saturating at both ends."""
    return _clamp(lux / GAUGE_MAX_LUX, 0.0, 1.0)


def get_recommendations(lux: float) -> Tuple[str, ...]:
    return RECOMMENDATIONS[classify(lux).category]


def get_sensor_status(lux):
    """Status payload for the API: band texts, colors and gauge fraction."""
    status = classify(lux).to_dict()
    status["progress"] = calculate_progress(lux)
    return status
