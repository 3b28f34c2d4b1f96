"""Data models for the L9ani assistant engine"""
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Union
from enum import Enum
from datetime import datetime


class Language(str, Enum):
    """Supported languages and dialects"""
    EN = "en"
    AR = "ar"
    DARIJA = "darija"


class ReportType(str, Enum):
    """Report categories supported by the platform"""
    PERSON = "person"
    PET = "pet"
    DOCUMENT = "document"
    ELECTRONICS = "electronics"
    VEHICLE = "vehicle"
    OTHER = "other"


class ConversationMode(str, Enum):
    """Active multi-turn flow, if any"""
    REPORT_CREATION = "report_creation"
    SEARCH = "search"


class IntentType(str, Enum):
    """Coarse-grained user goals"""
    CREATE_REPORT = "create_report"
    SEARCH_REPORTS = "search_reports"
    CHECK_STATUS = "check_status"
    PLATFORM_HELP = "platform_help"
    CANCEL = "cancel"


class SlotKind(str, Enum):
    """Validator applied to a slot answer"""
    TEXT = "text"
    CHOICE = "choice"
    CITY = "city"
    YEAR = "year"


class SlotSection(str, Enum):
    """Summary section a slot belongs to"""
    IDENTITY = "identity"
    DESCRIPTION = "description"
    LOCATION = "location"


def localized(texts: Dict[str, str], language: Union[Language, str]) -> str:
    """Pick the text for a language, falling back to English."""
    key = language.value if isinstance(language, Language) else language
    return texts.get(key) or texts.get(Language.EN.value, "")


class WireModel(BaseModel):
    """Base model using camelCase names on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class QuickReply(WireModel):
    """A pre-canned reply offered to the user"""
    text: str
    action: str
    data: Optional[Dict[str, Any]] = None


class NavigationAction(WireModel):
    """Client-side navigation requested by the assistant"""
    type: str = "navigate"
    route: str
    params: Optional[Dict[str, Any]] = None


class AssistantResponse(WireModel):
    """What the user sees for one turn"""
    text: str
    quick_replies: List[QuickReply] = Field(default_factory=list)
    progress: Optional[str] = None
    action: Optional[NavigationAction] = None


class ChatUser(WireModel):
    """Authenticated user record passed in by the caller"""
    id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SlotOption(WireModel):
    """An allowed value for a categorical slot"""
    value: str
    labels: Dict[str, str]
    synonyms: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class SlotDefinition(WireModel):
    """One question in a report dialogue"""
    key: str
    prompt: Dict[str, str]
    label: Dict[str, str]
    required: bool = False
    kind: SlotKind = SlotKind.TEXT
    section: SlotSection = SlotSection.DESCRIPTION
    options: List[SlotOption] = Field(default_factory=list)

    class Config:
        frozen = True


class ReportSession(WireModel):
    """Immutable state of a report-creation dialogue"""
    report_type: ReportType
    language: Language = Language.EN
    slots: List[SlotDefinition] = Field(alias="schema")
    collected_data: Dict[str, str] = Field(default_factory=dict)
    current_slot_index: int = 0
    is_complete: bool = False
    progress: float = 0.0
    include_optional: bool = False
    found: bool = False

    class Config:
        frozen = True

    @property
    def current_slot(self) -> Optional[SlotDefinition]:
        """Slot awaiting an answer, or None once the schema is exhausted"""
        if self.current_slot_index < len(self.slots):
            return self.slots[self.current_slot_index]
        return None

    @property
    def required_keys(self) -> List[str]:
        return [slot.key for slot in self.slots if slot.required]

    @property
    def all_required_filled(self) -> bool:
        return all(key in self.collected_data for key in self.required_keys)


class SearchParams(WireModel):
    """Structured filters parsed from free text"""
    report_type: Optional[ReportType] = None
    city: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    original_query: str = ""


class SearchContext(WireModel):
    """Search state kept for refinement follow-ups"""
    last_query: str = ""
    last_params: Optional[SearchParams] = None
    result_count: int = 0


class ConversationContext(WireModel):
    """Opaque, caller-persisted conversation state"""
    mode: Optional[ConversationMode] = None
    language: Optional[Language] = None
    report_context: Optional[ReportSession] = None
    search_context: Optional[SearchContext] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary the caller persists"""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ConversationContext":
        """Create context from a wire dictionary"""
        return cls.model_validate(data or {})


class ReportRecord(WireModel):
    """A published report as returned by the report store"""
    id: str
    report_type: ReportType
    status: str = "approved"
    city: Optional[str] = None
    last_known_location: Optional[str] = None
    additional_info: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    owner_id: Optional[str] = None


class SearchResult(WireModel):
    """A candidate report with its relevance score"""
    report: ReportRecord
    relevance_score: float = 0.0


class SearchOutcome(WireModel):
    """Ranked search results"""
    items: List[SearchResult] = Field(default_factory=list)
    total_count: int = 0
