"""
Report slot schemas.

Static question sequences for each report category. Every schema lists the
required identifying fields first, then optional descriptive fields, then the
shared location tail (city, last known location, additional details), so a
dialogue abandoned midway still yields a usable partial draft.
"""

import logging
from typing import Dict, List, Optional, Union

from models.schemas import (
    ReportType,
    SlotDefinition,
    SlotKind,
    SlotOption,
    SlotSection,
)

logger = logging.getLogger(__name__)


class UnknownReportType(ValueError):
    """Raised when a report category is not one of the supported types"""

    code = "unknown_type"

    def __init__(self, report_type: object):
        self.report_type = report_type
        super().__init__(f"Unknown report type: {report_type!r}")


# Summary labels per field key
FIELD_LABELS: Dict[str, Dict[str, str]] = {
    "firstName": {"en": "First name", "ar": "الاسم الأول", "darija": "Smiya"},
    "lastName": {"en": "Last name", "ar": "اسم العائلة", "darija": "Knya"},
    "dateOfBirth": {"en": "Date of birth / age", "ar": "تاريخ الميلاد / العمر", "darija": "L3mer"},
    "gender": {"en": "Gender", "ar": "الجنس", "darija": "Jins"},
    "healthStatus": {"en": "Health", "ar": "الحالة الصحية", "darija": "Se7a"},
    "petName": {"en": "Pet name", "ar": "اسم الحيوان", "darija": "Smiya"},
    "petType": {"en": "Pet type", "ar": "نوع الحيوان", "darija": "Noo3"},
    "breed": {"en": "Breed", "ar": "السلالة", "darija": "Sslala"},
    "color": {"en": "Color", "ar": "اللون", "darija": "Lon"},
    "size": {"en": "Size", "ar": "الحجم", "darija": "L7ejm"},
    "documentType": {"en": "Document type", "ar": "نوع الوثيقة", "darija": "Noo3 lwra9a"},
    "documentNumber": {"en": "Document number", "ar": "رقم الوثيقة", "darija": "Noumero"},
    "ownerName": {"en": "Owner name", "ar": "اسم صاحب الوثيقة", "darija": "Smiya dyal mol lwra9a"},
    "deviceType": {"en": "Device type", "ar": "نوع الجهاز", "darija": "Noo3 jihaz"},
    "brand": {"en": "Brand", "ar": "الماركة", "darija": "Marka"},
    "model": {"en": "Model", "ar": "الموديل", "darija": "Model"},
    "serialNumber": {"en": "Serial / IMEI", "ar": "الرقم التسلسلي", "darija": "Serial / IMEI"},
    "vehicleType": {"en": "Vehicle type", "ar": "نوع المركبة", "darija": "Noo3"},
    "year": {"en": "Year", "ar": "السنة", "darija": "L3am"},
    "licensePlate": {"en": "License plate", "ar": "رقم اللوحة", "darija": "Matricule"},
    "itemName": {"en": "Item", "ar": "الغرض", "darija": "L7aja"},
    "itemDescription": {"en": "Description", "ar": "الوصف", "darija": "Wasf"},
    "city": {"en": "City", "ar": "المدينة", "darija": "Lmdina"},
    "lastKnownLocation": {"en": "Location", "ar": "الموقع", "darija": "Blasa"},
    "additionalInfo": {"en": "Additional details", "ar": "تفاصيل إضافية", "darija": "Tafasil khrin"},
}

GENDER_OPTIONS = [
    SlotOption(
        value="male",
        labels={"en": "Male", "ar": "ذكر", "darija": "Rajel"},
        synonyms=["male", "m", "man", "boy", "homme", "ذكر", "ولد", "رجل", "راجل", "rajel", "weld", "dker"],
    ),
    SlotOption(
        value="female",
        labels={"en": "Female", "ar": "أنثى", "darija": "Mra"},
        synonyms=["female", "f", "woman", "girl", "femme", "أنثى", "بنت", "امرأة", "مرا", "mra", "bent", "ntha"],
    ),
]

SIZE_OPTIONS = [
    SlotOption(
        value="small",
        labels={"en": "Small", "ar": "صغير", "darija": "Sghir"},
        synonyms=["small", "little", "tiny", "صغير", "صغيرة", "sghir", "sghira", "s9ir"],
    ),
    SlotOption(
        value="medium",
        labels={"en": "Medium", "ar": "متوسط", "darija": "Wast"},
        synonyms=["medium", "average", "mid", "متوسط", "متوسطة", "وسط", "wast", "west", "mtwasset"],
    ),
    SlotOption(
        value="large",
        labels={"en": "Large", "ar": "كبير", "darija": "Kbir"},
        synonyms=["large", "big", "huge", "كبير", "كبيرة", "kbir", "kbira"],
    ),
]


def _slot(key: str, prompt: Dict[str, str], required: bool = False,
          section: SlotSection = SlotSection.DESCRIPTION, kind: SlotKind = SlotKind.TEXT,
          options: Optional[List[SlotOption]] = None) -> SlotDefinition:
    return SlotDefinition(
        key=key,
        prompt=prompt,
        label=FIELD_LABELS[key],
        required=required,
        kind=kind,
        section=section,
        options=options or [],
    )


def _location_tail(city: Dict[str, str], location: Dict[str, str],
                   additional: Dict[str, str]) -> List[SlotDefinition]:
    """Shared closing slots for every category"""
    return [
        _slot("city", city, required=True, section=SlotSection.LOCATION, kind=SlotKind.CITY),
        _slot("lastKnownLocation", location, required=True, section=SlotSection.LOCATION),
        _slot("additionalInfo", additional),
    ]


_LOST_IT_CITY = {
    "en": "In which city did you lose it?",
    "ar": "في أي مدينة فقدته؟",
    "darija": "F ina mdina da3 lik? ",
}
_LAST_HAD_IT = {
    "en": "Where did you last have it?",
    "ar": "أين كان معك آخر مرة؟",
    "darija": "Fin kan m3ak akher mra?",
}


def _build_schemas() -> Dict[ReportType, List[SlotDefinition]]:
    """Assemble the static schema table"""
    return {
        ReportType.PERSON: [
            _slot("firstName", {
                "en": "What is the person's first name?",
                "ar": "ما هو الاسم الأول للشخص؟",
                "darija": "Chno smiya lwla dyalo/dyalha?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("lastName", {
                "en": "What is the person's last name?",
                "ar": "ما هو اسم العائلة؟",
                "darija": "Chno knya dyalo/dyalha?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("dateOfBirth", {
                "en": "What is their date of birth? (or approximate age)",
                "ar": "ما هو تاريخ ميلادهم؟ (أو العمر التقريبي)",
                "darija": "Ch7al f 3mro/3mrha? (wla tarikh lizdiyad)",
            }),
            _slot("gender", {
                "en": "What is their gender?",
                "ar": "ما هو الجنس؟",
                "darija": "Rajel wla mra?",
            }, kind=SlotKind.CHOICE, options=GENDER_OPTIONS),
            _slot("healthStatus", {
                "en": "Do they have any health conditions? (physical, mental, or none)",
                "ar": "هل لديهم أي حالة صحية؟ (جسدية، نفسية، أو لا شيء)",
                "darija": "Wach 3ndo/3ndha chi mochkil s7i? (jasadi, nafsi, wla walo)",
            }),
        ] + _location_tail(
            {
                "en": "In which city were they last seen?",
                "ar": "في أي مدينة شوهدوا آخر مرة؟",
                "darija": "F ina mdina tchafo akher mra?",
            },
            {
                "en": "Where exactly were they last seen? (neighborhood, street, landmark)",
                "ar": "أين شوهدوا بالضبط؟ (الحي، الشارع، معلم قريب)",
                "darija": "Fin bdabt? (l7ouma, zzan9a, chi blasa m3roufa)",
            },
            {
                "en": "Any additional details? (what they were wearing, distinguishing features, circumstances)",
                "ar": "أي تفاصيل إضافية؟ (ماذا كانوا يرتدون، علامات مميزة، الظروف)",
                "darija": "Chi tafasil khrin? (chno kan labes, chi 7aja mmayza, kifach da3)",
            },
        ),
        ReportType.PET: [
            _slot("petName", {
                "en": "What is your pet's name?",
                "ar": "ما هو اسم حيوانك الأليف؟",
                "darija": "Chno smito?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("petType", {
                "en": "What type of pet? (dog, cat, bird, etc.)",
                "ar": "ما نوع الحيوان؟ (كلب، قط، طائر، إلخ)",
                "darija": "Chno howa? (kelb, mch, tir, ...)",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("breed", {
                "en": "What breed? (if known)",
                "ar": "ما السلالة؟ (إذا كانت معروفة)",
                "darija": "Chno sslala dyalo? (ila 3refti)",
            }),
            _slot("color", {
                "en": "What color is your pet?",
                "ar": "ما لون حيوانك؟",
                "darija": "Chno lon dyalo?",
            }),
            _slot("size", {
                "en": "What size? (small, medium, large)",
                "ar": "ما الحجم؟ (صغير، متوسط، كبير)",
                "darija": "Kbir wla sghir wla wast?",
            }, kind=SlotKind.CHOICE, options=SIZE_OPTIONS),
        ] + _location_tail(
            {
                "en": "In which city did you lose them?",
                "ar": "في أي مدينة فقدتهم؟",
                "darija": "F ina mdina da3?",
            },
            {
                "en": "Where exactly did you last see them?",
                "ar": "أين رأيتهم آخر مرة بالضبط؟",
                "darija": "Fin bdabt cheftih akher mra?",
            },
            {
                "en": "Any additional details? (collar, microchip, behavior)",
                "ar": "أي تفاصيل إضافية؟ (طوق، شريحة، سلوك)",
                "darija": "Chi tafasil khrin? (colier, puce, kifach kaydir)",
            },
        ),
        ReportType.DOCUMENT: [
            _slot("documentType", {
                "en": "What type of document? (ID card, passport, driver's license, etc.)",
                "ar": "ما نوع الوثيقة؟ (بطاقة هوية، جواز سفر، رخصة قيادة، إلخ)",
                "darija": "Chno noo3 lwra9a? (lakart, passpor, permis, ...)",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("documentNumber", {
                "en": "Do you know the document number? (don't share the full number for safety)",
                "ar": "هل تعرف رقم الوثيقة؟ (لا تشارك الرقم الكامل للأمان)",
                "darija": "3refti noumero? (ma t3tich noumero kamel 3la 9bel l2aman)",
            }),
            _slot("ownerName", {
                "en": "Whose name is on the document?",
                "ar": "ما اسم صاحب الوثيقة؟",
                "darija": "Smiyat mol lwra9a?",
            }),
        ] + _location_tail(
            _LOST_IT_CITY,
            {
                "en": "Where do you think you lost it?",
                "ar": "أين تعتقد أنك فقدتها؟",
                "darija": "Fin kadenn da3at lik?",
            },
            {
                "en": "Any additional details about where or when you lost it?",
                "ar": "أي تفاصيل إضافية عن مكان أو وقت الفقدان؟",
                "darija": "Chi tafasil khrin 3la fin wla fo9ach da3at?",
            },
        ),
        ReportType.ELECTRONICS: [
            _slot("deviceType", {
                "en": "What type of device? (phone, laptop, tablet, etc.)",
                "ar": "ما نوع الجهاز؟ (هاتف، حاسوب، لوحي، إلخ)",
                "darija": "Chno noo3 jihaz? (tilifoun, portable, tablette, ...)",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("brand", {
                "en": "What brand is it?",
                "ar": "ما هي الماركة؟",
                "darija": "Chno lmarka?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("model", {
                "en": "What model?",
                "ar": "ما الموديل؟",
                "darija": "Chno lmodel?",
            }),
            _slot("color", {
                "en": "What color?",
                "ar": "ما اللون؟",
                "darija": "Chno lon?",
            }),
            _slot("serialNumber", {
                "en": "Do you have the serial number or IMEI?",
                "ar": "هل لديك الرقم التسلسلي أو IMEI؟",
                "darija": "3ndek noumero dyal IMEI wla serial?",
            }),
        ] + _location_tail(
            _LOST_IT_CITY,
            _LAST_HAD_IT,
            {
                "en": "Any additional details? (case, stickers, damage)",
                "ar": "أي تفاصيل إضافية؟ (غطاء، ملصقات، أضرار)",
                "darija": "Chi tafasil khrin? (lcouver, chi stickers, chi kasra)",
            },
        ),
        ReportType.VEHICLE: [
            _slot("vehicleType", {
                "en": "What type of vehicle? (car, motorcycle, bicycle, etc.)",
                "ar": "ما نوع المركبة؟ (سيارة، دراجة نارية، دراجة، إلخ)",
                "darija": "Chno noo3? (tomobil, moto, bikala, ...)",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("brand", {
                "en": "What brand/make?",
                "ar": "ما هي الماركة؟",
                "darija": "Chno lmarka?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("model", {
                "en": "What model?",
                "ar": "ما الموديل؟",
                "darija": "Chno lmodel?",
            }),
            _slot("color", {
                "en": "What color?",
                "ar": "ما اللون؟",
                "darija": "Chno lon?",
            }),
            _slot("year", {
                "en": "What year?",
                "ar": "ما السنة؟",
                "darija": "Chno l3am?",
            }, kind=SlotKind.YEAR),
            _slot("licensePlate", {
                "en": "What is the license plate number?",
                "ar": "ما رقم اللوحة؟",
                "darija": "Chno lmatricule?",
            }),
        ] + _location_tail(
            {
                "en": "In which city was it lost/stolen?",
                "ar": "في أي مدينة فُقدت/سُرقت؟",
                "darija": "F ina mdina da3at/tsre9at?",
            },
            {
                "en": "Where was it last parked/seen?",
                "ar": "أين كانت آخر مرة؟",
                "darija": "Fin kanet akher mra?",
            },
            {
                "en": "Any additional details? (damage, modifications, contents)",
                "ar": "أي تفاصيل إضافية؟ (أضرار، تعديلات، محتويات)",
                "darija": "Chi tafasil khrin? (chi kasra, chi ta3dil, chno kan fiha)",
            },
        ),
        ReportType.OTHER: [
            _slot("itemName", {
                "en": "What is the item?",
                "ar": "ما هو الغرض؟",
                "darija": "Chno hiya l7aja?",
            }, required=True, section=SlotSection.IDENTITY),
            _slot("itemDescription", {
                "en": "Can you describe it in detail?",
                "ar": "هل يمكنك وصفه بالتفصيل؟",
                "darija": "Wsefha liya mzyan?",
            }),
        ] + _location_tail(
            _LOST_IT_CITY,
            _LAST_HAD_IT,
            {
                "en": "Any additional details?",
                "ar": "أي تفاصيل إضافية؟",
                "darija": "Chi tafasil khrin?",
            },
        ),
    }


class SlotSchemaRegistry:
    """
    Read-only registry of slot schemas keyed by report type.

    Schemas are built once at construction and shared; callers receive new
    list objects so the registry itself is never mutated at request time.
    """

    def __init__(self):
        self._schemas = _build_schemas()
        logger.debug(f"Loaded slot schemas for {len(self._schemas)} report types")

    def get_schema(self, report_type: Union[ReportType, str]) -> List[SlotDefinition]:
        """
        Get the ordered slot definitions for a report type.

        Args:
            report_type: A ReportType or its string value

        Returns:
            Ordered list of slot definitions

        Raises:
            UnknownReportType: if the type is not supported
        """
        return list(self._schemas[self.resolve_type(report_type)])

    def resolve_type(self, report_type: Union[ReportType, str, None]) -> ReportType:
        """Validate and coerce a report type value"""
        try:
            return ReportType(report_type)
        except ValueError:
            raise UnknownReportType(report_type)

    def required_count(self, report_type: Union[ReportType, str]) -> int:
        return sum(1 for slot in self.get_schema(report_type) if slot.required)


# Global registry instance
slot_registry = SlotSchemaRegistry()
