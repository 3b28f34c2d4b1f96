"""
Multilingual lexicon tables and phrase matching.

This module holds the rule tables used by language detection, cancellation,
intent classification and entity extraction as plain data, together with the
text normalization and n-gram phrase matcher that every consumer shares.
Adding a synonym or a new dialect is a data change here, not a code change.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

ARABIC_SCRIPT = re.compile(r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF]")
_ARABIC_DIACRITICS = re.compile(r"[\u0610-\u061A\u064B-\u065F\u0670\u06D6-\u06ED]")
_ALEF_VARIANTS = re.compile(r"[إأآٱ]")
_NON_WORD = re.compile(r"[^\w\s]", re.UNICODE)
_TATWEEL = "\u0640"

_ARABIC_PREFIXES = ("وال", "بال", "فال", "كال", "لل", "ال", "و", "ف", "ب", "ل")
_ARABIC_SUFFIXES = ("ها", "هم", "نا", "كم", "ي", "ه", "ك")
_MIN_STEM_LENGTH = 3


def normalize_text(text: Optional[str]) -> str:
    """
    Normalize text for lexicon lookups.

    Lowercases, strips Arabic diacritics and tatweel, folds alef variants,
    replaces punctuation with spaces and collapses whitespace.
    """
    text = (text or "").lower()
    text = _ARABIC_DIACRITICS.sub("", text).replace(_TATWEEL, "")
    text = _ALEF_VARIANTS.sub("ا", text).replace("ى", "ي")
    text = _NON_WORD.sub(" ", text)
    return " ".join(text.split())


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into normalized tokens"""
    return normalize_text(text).split()


def has_arabic_script(text: Optional[str]) -> bool:
    return bool(ARABIC_SCRIPT.search(text or ""))


def token_forms(token: str) -> Set[str]:
    """
    Candidate lookup forms for a single token.

    Arabic tokens also yield variants without clitic prefixes (al-, wa-, bi-,
    fi-, li-) and possessive suffixes; Latin tokens yield a naive singular.
    """
    forms = {token}
    if has_arabic_script(token):
        stems = {token}
        for prefix in _ARABIC_PREFIXES:
            if token.startswith(prefix) and len(token) - len(prefix) >= _MIN_STEM_LENGTH:
                stems.add(token[len(prefix):])
        for stem in list(stems):
            for suffix in _ARABIC_SUFFIXES:
                if stem.endswith(suffix) and len(stem) - len(suffix) >= _MIN_STEM_LENGTH - 1:
                    stems.add(stem[:-len(suffix)])
        forms |= stems
    elif len(token) > 3:
        if token.endswith("ies"):
            forms.add(token[:-3] + "y")
        elif token.endswith("s") and not token.endswith("ss"):
            forms.add(token[:-1])
    return forms


# ---------------------------------------------------------------------------
# Phrase matcher
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhraseMatch:
    """A lexicon phrase found in a token sequence"""
    label: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class PhraseMatcher:
    """
    Longest-match n-gram lookup over normalized tokens.

    Entries map a label (a language, a report type, a canonical city...) to
    the phrases that express it. Matching walks the tokens left to right and
    prefers the longest phrase at each position.
    """

    def __init__(self, entries: Dict[str, Iterable[str]]):
        self._index: Dict[Tuple[str, ...], str] = {}
        self._max_length = 1
        for label, phrases in entries.items():
            for phrase in phrases:
                key = tuple(tokenize(phrase))
                if not key:
                    continue
                self._index.setdefault(key, label)
                self._max_length = max(self._max_length, len(key))

    def _lookup(self, window: List[str]) -> Optional[str]:
        label = self._index.get(tuple(window))
        if label is not None:
            return label
        # Clitics and plurals only ever attach to the first or last token
        for form in token_forms(window[0]):
            label = self._index.get((form,) + tuple(window[1:]))
            if label is not None:
                return label
        if len(window) > 1:
            for form in token_forms(window[-1]):
                label = self._index.get(tuple(window[:-1]) + (form,))
                if label is not None:
                    return label
        return None

    def find_all(self, tokens: List[str]) -> List[PhraseMatch]:
        """Return non-overlapping matches in text order"""
        matches = []
        position = 0
        while position < len(tokens):
            longest = min(self._max_length, len(tokens) - position)
            for size in range(longest, 0, -1):
                label = self._lookup(tokens[position:position + size])
                if label is not None:
                    matches.append(PhraseMatch(label, position, position + size))
                    position += size
                    break
            else:
                position += 1
        return matches

    def find_first(self, tokens: List[str]) -> Optional[PhraseMatch]:
        matches = self.find_all(tokens)
        return matches[0] if matches else None

    def matches(self, tokens: List[str]) -> bool:
        return bool(self.find_all(tokens))

    def matches_whole(self, tokens: List[str]) -> bool:
        """True when the entire token sequence is exactly one phrase"""
        return bool(tokens) and self._lookup(tokens) is not None


# ---------------------------------------------------------------------------
# Language detection
# ---------------------------------------------------------------------------

# One of these in Latin-script text is enough to call it darija
DARIJA_STRONG_MARKERS = [
    "wach", "wash", "bghit", "bghiti", "bghina", "kifach", "kifash", "chno", "chnou",
    "achno", "ashno", "dyal", "dial", "dyali", "diali", "dyalek", "dialek", "dyalo",
    "dyalha", "3afak", "afak", "mzyan", "mezyan", "mzyana", "daba", "khassni",
    "khasni", "khessni", "bzaf", "bezzaf", "chwiya", "shwiya", "labas", "wakha",
    "waxa", "lqit", "l9it", "lqina", "tlef", "tlfat", "tlefli", "da3", "da3at",
    "da3li", "ghadi", "kayn", "kayna", "kaynin", "makaynch", "makaynsh", "hadchi",
    "chkoun", "shkoun", "3lach", "wlidi", "bnti", "khoya", "khti", "sahbi", "tomobil",
    "tilifoun", "qelleb", "9elleb", "nqelleb", "n9elleb", "kanqelleb", "kan9elleb",
    "salam", "slm", "choukran", "chokran", "bslama", "beslama", "kidayr", "kidayra",
    "smiya", "smito", "smitha", "blaghi", "blaghati", "kanseli", "nbelegh", "nblegh",
    "3awni", "3awenni", "werrini", "wrini", "chefti", "cheft", "bezzerba", "bzerba",
]

# Ambiguous on their own; they count toward the darija token ratio
DARIJA_WEAK_MARKERS = [
    "nta", "nti", "hna", "ila", "rah", "raha", "li", "w", "f", "l", "fin", "fen",
    "mn", "chi", "shi", "ghir", "wla", "ola", "bach", "hadi", "walo", "m3a",
    "3la", "kelb", "mch", "qett", "weld", "bent", "ch7al", "hta", "7ta", "mazal",
]

# Letters written with digits (3 = ain, 7 = ha, 9 = qaf) inside a Latin word
ARABIZI_TOKEN = re.compile(r"^(?:[a-z]*[379][a-z]{2,}|[a-z]+[379][a-z]+)$")


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

# Phrases that cancel wherever they appear in the message
CANCEL_PHRASES = {
    "en": [
        "cancel", "start over", "never mind", "nevermind", "forget it", "main menu",
        "start again",
    ],
    "ar": [
        "إلغاء", "الغاء", "ألغي", "الغي", "إبدأ من جديد", "ابدأ من جديد", "القائمة الرئيسية",
        "من البداية", "نبدا من جديد", "خاصني نبدا من جديد", "بدا من الأول", "كانسيلي", "بلاش",
        "رجعني",
    ],
    "darija": [
        "kanseli", "kansili", "annuler", "nbda mn jdid", "nbdaw mn jdid", "nbda men jdid",
        "mn lawel", "men lowel", "bla hadchi", "khalliha", "khliha", "nsa",
    ],
}

# Words that only cancel when they are the whole message
CANCEL_WORDS = {
    "en": ["stop", "quit", "exit", "restart", "back", "go back", "reset"],
    "ar": ["توقف", "خروج", "رجوع", "ارجع", "وقف", "خليها", "رجع", "لور", "نسى"],
    "darija": ["rje3", "rja3", "lor", "baraka", "wqef", "w9ef", "sme7 lia"],
}


# ---------------------------------------------------------------------------
# Intent cues
# ---------------------------------------------------------------------------

CREATE_REPORT_CUES = {
    "en": [
        "missing", "lost", "i lost", "went missing", "disappeared", "vanished",
        "misplaced", "stolen", "cant find", "can t find", "cannot find", "report a",
        "new report", "want to report", "need to report", "file a report",
        "create a report", "create report", "help me report", "how do i report",
        "how to report", "i found", "we found", "found a", "picked up",
    ],
    "ar": [
        "مفقود", "مفقودة", "ضائع", "ضائعة", "فقدت", "ضاع", "ضاعت", "اختفى", "اختفت",
        "ضيعت", "سرق", "سرقت", "أبلغ", "نبلغ", "بلاغ جديد", "أريد أن أبلغ", "لا أجد",
        "لم أجد", "وجدت", "لقيت", "ضايع", "ضايعة", "تلف", "تلفت", "ما لقيتش",
        "بغيت نبلغ", "دير بلاغ", "تسرق", "تشفر",
    ],
    "darija": [
        "da3", "da3at", "da3li", "da3t", "tlef", "tlfat", "tlefli", "tlfatli", "tlft",
        "ma lqitouch", "ma l9itouch", "ma lqitch", "ma l9itch", "tsre9", "tsreq",
        "tchffer", "tchefret", "bghit nbelegh", "nbelegh", "nblegh", "ndir blagh",
        "dir blagh", "lqit", "l9it", "mfqoud", "mefqoud", "dayi3", "daye3", "daya3",
    ],
}

SEARCH_CUES = {
    "en": [
        "search", "find", "look for", "looking for", "searching", "browse",
        "have you seen", "has anyone seen", "did anyone see", "anyone seen",
        "show me", "show reports", "list reports", "any reports", "reports about",
        "reports in",
    ],
    "ar": [
        "بحث", "ابحث", "أبحث", "البحث", "شفت", "شاهدت", "رأيت", "هل رأى", "هل شاهد",
        "من رأى", "أرني", "عرض", "قلب", "نقلب", "كنقلب", "دور على", "فتش",
    ],
    "darija": [
        "qelleb", "9elleb", "nqelleb", "n9elleb", "kanqelleb", "kan9elleb", "chft",
        "cheft", "chefti", "wach chi 7ed chaf", "chkoun chaf", "werrini", "wrini",
        "fin kayn",
    ],
}

STATUS_CUES = {
    "en": [
        "my reports", "my report", "status", "report status", "any news", "any updates",
        "updates on", "track my", "follow up", "any match", "any leads", "notifications",
    ],
    "ar": [
        "حالة", "بلاغي", "بلاغاتي", "البلاغ ديالي", "تحديثات", "أخبار", "متابعة", "تتبع",
        "هل من جديد", "اشعارات",
    ],
    "darija": [
        "blaghi", "blaghati", "lblagh dyali", "lblaghat dyali", "chi jdid", "chi khbar",
        "fin wsel", "tabe3", "status dyali",
    ],
}

HELP_CUES = {
    "en": [
        "help", "how does it work", "how do i use", "how to use", "what can you do",
        "support", "guide", "i need help", "instructions", "how it works",
    ],
    "ar": ["مساعدة", "ساعدني", "كيف يعمل", "دليل", "عاوني", "عاونني", "شرح", "اشرح"],
    "darija": ["3awni", "3awenni", "m3awna", "kifach nkhdem", "kifach khedam", "fhemni"],
}

GREETING_CUES = {
    "en": [
        "hello", "hi", "hey", "greetings", "good morning", "good afternoon",
        "good evening", "hiya", "howdy", "what s up", "hi there", "hello there",
    ],
    "ar": [
        "مرحبا", "أهلا", "اهلا", "السلام عليكم", "سلام", "صباح الخير", "مساء الخير", "هلا",
        "اهلين", "لاباس",
    ],
    "darija": [
        "salam", "salamo alaykom", "slm", "labas", "la bas", "ahlan", "marhba",
        "sba7 lkhir", "msa lkhir", "kidayr", "kidayra", "ki dayr",
    ],
}

THANKS_CUES = {
    "en": ["thanks", "thank you", "thx", "ty", "appreciate it", "many thanks"],
    "ar": ["شكرا", "جزاك الله", "بارك الله فيك", "الله يخليك", "تبارك الله"],
    "darija": ["choukran", "chokran", "shukran", "lah ykhlik", "baraka llahou fik", "merci"],
}

GOODBYE_CUES = {
    "en": ["bye", "goodbye", "good bye", "see you", "take care", "good night", "bye bye"],
    "ar": ["مع السلامة", "وداعا", "إلى اللقاء", "باي", "بسلامة", "تهلا فراسك"],
    "darija": ["bslama", "b slama", "beslama", "tsbh 3la khir", "nchoufek"],
}

EMERGENCY_CUES = {
    "en": [
        "urgent", "emergency", "police", "kidnapped", "abducted", "danger", "dangerous",
        "call police", "life threatening", "right now",
    ],
    "ar": ["طوارئ", "عاجل", "شرطة", "خطف", "اختطاف", "خطر", "بوليس", "بالزربة", "خطير"],
    "darija": [
        "bolis", "boulis", "lbolis", "bzerba", "bezzerba", "khtf", "tkhtef", "khatfouh",
        "khatar", "3ajel",
    ],
}

# Subset of report cues meaning the user is holding something someone else lost
FOUND_CUES = {
    "en": [
        "i found", "we found", "found a", "found an", "found this", "found someone",
        "someone found", "i have found", "picked up", "came across",
    ],
    "ar": ["وجدت", "وجدنا", "عثرت", "لقيت", "لقينا", "صادفت"],
    "darija": ["lqit", "l9it", "lqina", "l9ina", "lqaw", "l9aw"],
}

# Typed equivalents of the skip quick reply
SKIP_WORDS = [
    "skip", "pass", "next", "no", "none", "nope", "n a",
    "تخطي", "تجاوز", "لا", "لا شيء", "سكيبي", "والو",
    "skipi", "douz", "walo", "la",
]

# Typed equivalents of the "done, go to form" quick reply
DONE_WORDS = [
    "done", "finish", "finished", "go to form", "that s all", "submit",
    "انتهيت", "للنموذج", "سالينا", "سير للفورم",
    "salina", "sali", "sir l form",
]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

REPORT_TYPE_NOUNS = {
    "person": [
        "person", "child", "kid", "boy", "girl", "man", "woman", "son", "daughter",
        "brother", "sister", "father", "mother", "grandfather", "grandmother",
        "old man", "baby", "teenager", "husband", "wife",
        "شخص", "طفل", "طفلة", "ولد", "بنت", "رجل", "امرأة", "ابني", "ابنتي", "ابن", "ابنة",
        "أخي", "أختي", "أبي", "أمي", "جدي", "جدتي", "رضيع", "دري", "راجل", "مرا", "ولدي",
        "بنتي", "خويا", "ختي", "شيباني",
        "weld", "wld", "wlidi", "bent", "bnt", "bnti", "drari", "derri", "rajel", "mra",
        "khoya", "khti", "chibani",
    ],
    "pet": [
        "pet", "dog", "cat", "bird", "animal", "puppy", "kitten", "parrot", "rabbit",
        "horse", "turtle", "hamster",
        "حيوان", "كلب", "قطة", "القط", "قط", "طائر", "عصفور", "ببغاء", "أرنب", "حصان", "مش",
        "قطوس", "طير", "قنية",
        "kelb", "klab", "mch", "mchicha", "qett", "9ett", "qettous", "9ettous",
        "hayawan", "9nia",
    ],
    "document": [
        "document", "id", "id card", "passport", "license", "licence", "driver s license",
        "card", "wallet", "papers", "certificate", "visa", "cin", "permit",
        "وثيقة", "وثائق", "جواز", "جواز سفر", "بطاقة", "رخصة", "محفظة", "شهادة", "هوية",
        "ورقة", "وراق", "كارطة", "باسبور", "بيرمي", "بزطام",
        "lwra9", "wra9", "lwraq", "karta", "lakart", "passpor", "bermi", "permis",
        "bztam", "bzttam", "beztam",
    ],
    "electronics": [
        "phone", "smartphone", "iphone", "laptop", "computer", "tablet", "ipad", "camera",
        "mobile", "device", "headphones", "airpods", "smartwatch", "charger", "macbook",
        "جهاز", "هاتف", "حاسوب", "كمبيوتر", "لوحي", "كاميرا", "جوال", "تيليفون", "بورطابل",
        "طابليط",
        "tilifoun", "tilifon", "tel", "portable", "bortable", "pc", "tablette", "tablit",
    ],
    "vehicle": [
        "car", "vehicle", "motorcycle", "motorbike", "bike", "bicycle", "scooter",
        "truck", "van",
        "سيارة", "مركبة", "دراجة", "دراجة نارية", "شاحنة", "طوموبيل", "موطور", "بيكالا",
        "تريبورتور",
        "tomobil", "tonobil", "tomobile", "moto", "motor", "bikala", "camion",
        "triporteur",
    ],
    "other": [
        "bag", "keys", "key", "backpack", "jewelry", "ring", "necklace", "glasses",
        "umbrella", "suitcase", "luggage",
        "حقيبة", "مفاتيح", "مفتاح", "خاتم", "نظارات", "صاك", "ساروت",
        "sak", "sarout", "swaret", "khatem", "ndader",
    ],
}

CITY_GAZETTEER = {
    "casablanca": ["casablanca", "casa", "dar el beida", "الدار البيضاء", "الدارالبيضاء", "كازا"],
    "rabat": ["rabat", "الرباط", "رباط"],
    "marrakech": ["marrakech", "marrakesh", "marrakch", "مراكش"],
    "fes": ["fes", "fez", "فاس"],
    "tangier": ["tangier", "tanger", "tanja", "طنجة"],
    "agadir": ["agadir", "أكادير", "اكادير"],
    "meknes": ["meknes", "meknès", "مكناس"],
    "oujda": ["oujda", "وجدة"],
    "kenitra": ["kenitra", "القنيطرة", "قنيطرة"],
    "tetouan": ["tetouan", "tétouan", "تطوان"],
    "safi": ["safi", "آسفي", "اسفي"],
    "el jadida": ["el jadida", "eljadida", "jdida", "الجديدة"],
    "beni mellal": ["beni mellal", "benimellal", "بني ملال"],
    "nador": ["nador", "الناظور", "ناظور"],
    "taza": ["taza", "تازة"],
    "settat": ["settat", "سطات"],
    "mohammedia": ["mohammedia", "المحمدية", "محمدية"],
    "khouribga": ["khouribga", "خريبكة"],
    "laayoune": ["laayoune", "layoune", "العيون"],
    "dakhla": ["dakhla", "الداخلة"],
}

COLOR_TERMS = {
    "black": ["black", "أسود", "سوداء", "كحل", "كحلة", "k7al", "kehla", "k7la"],
    "white": ["white", "أبيض", "بيضاء", "بيض", "بيضا", "byed", "bida", "bayda"],
    "red": ["red", "أحمر", "حمراء", "حمر", "حمرا", "7mar", "7amra", "hmar"],
    "blue": ["blue", "أزرق", "زرقاء", "زرق", "زرقا", "zre9", "zer9a", "zreq"],
    "green": ["green", "أخضر", "خضراء", "خضر", "خضرا", "khder", "khedra"],
    "yellow": ["yellow", "أصفر", "صفراء", "صفر", "صفرا", "sfer", "sefra"],
    "brown": ["brown", "بني", "بنية", "قهوي", "قهوية", "9ehwi", "qehwi"],
    "gray": ["gray", "grey", "رمادي", "رمادية", "rmadi"],
    "orange": ["orange", "برتقالي", "ليموني", "limouni"],
}

TIME_PERIODS = {
    "today": [
        "today", "this morning", "this evening", "tonight", "اليوم", "هذا الصباح",
        "هذا المساء", "هاد الصباح", "هاد العشية", "lyoum", "lyom", "had sba7",
    ],
    "yesterday": ["yesterday", "أمس", "البارحة", "البارح", "مبارح", "lbare7", "lbareh", "l bare7"],
    "this_week": [
        "this week", "few days ago", "recent", "recently", "هذا الأسبوع", "مؤخرا", "قبل أيام",
        "هاد السيمانة", "هاد الأيام", "had simana", "had liyam",
    ],
    "this_month": [
        "this month", "last month", "هذا الشهر", "الشهر الماضي", "هاد الشهر",
        "الشهر اللي فات", "had chher", "chher li fat",
    ],
}

STOPWORDS = {
    "en": [
        "a", "an", "the", "is", "are", "was", "were", "been", "be", "have", "has", "had",
        "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
        "can", "need", "to", "of", "in", "for", "on", "with", "at", "by", "from", "up",
        "about", "into", "near", "around", "during", "before", "after", "then", "here",
        "there", "when", "where", "why", "how", "all", "any", "some", "no", "not", "only",
        "so", "than", "too", "very", "just", "and", "but", "if", "or", "as", "i", "me",
        "my", "we", "our", "you", "your", "he", "him", "his", "she", "her", "it", "its",
        "they", "them", "what", "which", "who", "this", "that", "these", "those", "am",
        "lost", "missing", "found", "seen", "looking", "look", "search", "find", "show",
        "help", "please", "anyone", "someone", "reports", "report",
    ],
    "ar": [
        "في", "من", "على", "إلى", "الى", "عن", "مع", "هذا", "هذه", "ذلك", "تلك", "التي",
        "الذي", "هو", "هي", "هم", "أنا", "انا", "نحن", "أنت", "كان", "كانت", "يكون", "قد",
        "لم", "لن", "أن", "إن", "لا", "ما", "هل", "أو", "و", "ثم", "لكن", "حتى", "إذا",
        "منذ", "بين", "بعد", "قبل", "كل", "بعض", "غير", "مثل", "أي", "كيف", "أين", "متى",
        "ماذا", "مفقود", "مفقودة", "ضائع", "ضاع", "ضاعت", "بحث", "ابحث", "أبحث",
        "هاد", "داك", "هادي", "ديك", "اللي", "شي", "هما", "حنا", "نتا", "نتي", "واش",
        "ولا", "باش", "بلا", "بحال", "فين", "فاش", "علاش", "شنو", "شكون", "ضايع", "قلب",
    ],
    "darija": [
        "f", "fi", "l", "w", "had", "hadi", "dak", "dik", "li", "chi", "shi", "hwa", "hia",
        "ana", "nta", "nti", "hna", "kan", "kant", "ma", "la", "wach", "ola", "wla",
        "bach", "bla", "b7al", "ghir", "kif", "fin", "fach", "3lach", "chno", "chkoun",
        "dyal", "dial", "m3a", "3la", "mn", "men", "da3", "da3at", "tlef", "tlfat",
        "qelleb", "9elleb", "kanqelleb", "nqelleb", "bghit", "3afak",
    ],
}


def all_languages(table: Dict[str, List[str]]) -> List[str]:
    """Flatten a per-language table into one phrase list"""
    phrases = []
    for language_phrases in table.values():
        phrases.extend(language_phrases)
    return phrases
