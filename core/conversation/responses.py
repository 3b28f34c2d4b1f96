"""
Localized assistant texts and quick-reply builders.

All user-facing wording lives here so handlers only pick message keys.
Darija texts are written in Latin script, matching how users type it.
"""

from typing import Any, Dict, List, Optional, Union

from models.schemas import Language, QuickReply, ReportType, localized

MESSAGES: Dict[str, Dict[str, str]] = {
    "greeting": {
        "en": "Hello{name}! 👋 I'm the L9ani assistant. I can help you report something missing or search the existing reports. What would you like to do?",
        "ar": "مرحبا{name}! 👋 أنا مساعد L9ani. يمكنني مساعدتك في الإبلاغ عن شيء مفقود أو البحث في البلاغات الموجودة. ماذا تريد أن تفعل؟",
        "darija": "Salam{name}! 👋 Ana l'assistant dyal L9ani. N9der n3awnek tdir declaration 3la chi 7aja da3et wla t9elleb f les declarations. Chno bghiti dir?",
    },
    "choose_type": {
        "en": "What would you like to report? Choose a category:",
        "ar": "عن ماذا تريد الإبلاغ؟ اختر فئة:",
        "darija": "3la chno bghiti tdir declaration? Khtar:",
    },
    "report_started": {
        "en": "Let's create a {type_label} report. I'll ask you a few questions.",
        "ar": "لننشئ بلاغا عن {type_label}. سأطرح عليك بعض الأسئلة.",
        "darija": "Yallah ndiro declaration 3la {type_label}. Ghadi nsewlek chi as2ila.",
    },
    "report_started_found": {
        "en": "Thank you for helping! 🎉 Let's describe the {type_label} you found so we can reunite it with its owner.",
        "ar": "شكرا على مساعدتك! 🎉 لنصف {type_label} الذي وجدته حتى نعيده إلى صاحبه.",
        "darija": "Chokran 3la lmousa3ada! 🎉 Yallah nwesfo {type_label} li lqiti bach nrej3oh l molah.",
    },
    "report_complete": {
        "en": "✅ Thank you! Your report details are ready. Review the summary, then complete the form to publish it.",
        "ar": "✅ شكرا! تفاصيل بلاغك جاهزة. راجع الملخص ثم أكمل النموذج لنشره.",
        "darija": "✅ Chokran! Lma3loumat dyal declaration wajdin. Chouf lmolakhass w kemmel lformulaire bach tnachrha.",
    },
    "summary_header": {
        "en": "📋 Report Summary",
        "ar": "📋 ملخص البلاغ",
        "darija": "📋 Molakhass dyal declaration",
    },
    "section_identity": {"en": "Identity", "ar": "الهوية", "darija": "L'identité"},
    "section_description": {"en": "Description", "ar": "الوصف", "darija": "Lwasf"},
    "section_location": {"en": "Location", "ar": "الموقع", "darija": "Lblasa"},
    "step": {"en": "Step", "ar": "الخطوة", "darija": "Marhala"},
    "hint_required": {
        "en": "⚠️ This information is required to continue.",
        "ar": "⚠️ هذه المعلومة مطلوبة للمتابعة.",
        "darija": "⚠️ Had lma3louma daroriya bach nkemmlo.",
    },
    "hint_choice": {
        "en": "⚠️ Please choose one of the options.",
        "ar": "⚠️ يرجى اختيار أحد الخيارات.",
        "darija": "⚠️ Khtar wa7ed mn les choix 3afak.",
    },
    "hint_year": {
        "en": "⚠️ Please enter a valid 4-digit year (e.g. 2019).",
        "ar": "⚠️ يرجى إدخال سنة صحيحة من 4 أرقام (مثلا 2019).",
        "darija": "⚠️ Kteb l3am b 4 ar9am (b7al 2019).",
    },
    "hint_cannot_skip": {
        "en": "⚠️ This question is required and can't be skipped.",
        "ar": "⚠️ هذا السؤال مطلوب ولا يمكن تخطيه.",
        "darija": "⚠️ Had so2al daroori, ma tgder tfoutou.",
    },
    "hint_not_ready": {
        "en": "⚠️ A few required questions still need an answer before finishing.",
        "ar": "⚠️ ما زالت بعض الأسئلة المطلوبة دون إجابة.",
        "darija": "⚠️ Ba9in chi as2ila darooriya khasshom jawab 9bel ma nsaliw.",
    },
    "search_prompt": {
        "en": "🔍 What are you looking for? Describe it, for example \"black dog in Casablanca\".",
        "ar": "🔍 عن ماذا تبحث؟ صِفه، مثلا \"كلب أسود في الدار البيضاء\".",
        "darija": "🔍 3la chno kat9elleb? Wsefh, b7al \"kelb k7al f casa\".",
    },
    "filter_prompt": {
        "en": "Add a detail to narrow the results, such as a city, a color or a category.",
        "ar": "أضف تفصيلا لتضييق النتائج، مثل المدينة أو اللون أو الفئة.",
        "darija": "Zid chi tafsil bach nsghro nata2ij, b7al lmdina wla lon wla noo3.",
    },
    "search_results_header": {
        "en": "🔍 Found {count} matching report(s):",
        "ar": "🔍 تم العثور على {count} بلاغ(ات) مطابقة:",
        "darija": "🔍 L9ina {count} declaration(s):",
    },
    "search_results_more": {
        "en": "Showing the top {shown}. Add details to refine your search.",
        "ar": "عرض أفضل {shown}. أضف تفاصيل لتحسين البحث.",
        "darija": "Hahoma a7san {shown}. Zid tafasil bach t9elleb mzyan.",
    },
    "no_results": {
        "en": "😕 No reports matched your search. Try rephrasing it or using different keywords.",
        "ar": "😕 لم نجد أي بلاغ مطابق. حاول إعادة الصياغة أو استخدام كلمات أخرى.",
        "darija": "😕 Ma l9ina 7ta declaration. 3awed ktebha b tari9a khra wla bdel lkalimat.",
    },
    "status_login": {
        "en": "🔐 Please log in to check the status of your reports.",
        "ar": "🔐 يرجى تسجيل الدخول للاطلاع على حالة بلاغاتك.",
        "darija": "🔐 Dkhol l compte dyalek bach tchouf declarations dyalek.",
    },
    "status_none": {
        "en": "You don't have any reports yet. Would you like to create one?",
        "ar": "ليس لديك أي بلاغ بعد. هل تريد إنشاء واحد؟",
        "darija": "Ma3ndek 7ta declaration. Bghiti tdir wa7da?",
    },
    "status_summary": {
        "en": "📂 You have {count} report(s): {breakdown}. Opening your reports page.",
        "ar": "📂 لديك {count} بلاغ(ات): {breakdown}. سيتم فتح صفحة بلاغاتك.",
        "darija": "📂 3ndek {count} declaration(s): {breakdown}. Ghadi n7ellek la page dyal declarations dyalek.",
    },
    "help": {
        "en": "ℹ️ I can help you:\n• Report a missing person, pet, document, device, vehicle or item\n• Search reports (e.g. \"lost phone in Rabat\")\n• Check the status of your reports\nType \"cancel\" at any time to start over.",
        "ar": "ℹ️ يمكنني مساعدتك في:\n• الإبلاغ عن شخص أو حيوان أو وثيقة أو جهاز أو مركبة أو غرض مفقود\n• البحث في البلاغات (مثلا \"هاتف ضائع في الرباط\")\n• الاطلاع على حالة بلاغاتك\nاكتب \"إلغاء\" في أي وقت للبدء من جديد.",
        "darija": "ℹ️ N9der n3awnek:\n• Tdir declaration 3la chi wa7ed, 7ayawan, wra9, tilifoun, tomobil wla chi 7aja\n• T9elleb f les declarations (b7al \"tilifoun da3 f rabat\")\n• Tchouf declarations dyalek\nKteb \"annuler\" f ay wa9t bach tbda mn jdid.",
    },
    "thanks": {
        "en": "You're welcome! 😊 Anything else I can help with?",
        "ar": "على الرحب والسعة! 😊 هل هناك شيء آخر يمكنني مساعدتك به؟",
        "darija": "Bla jmil! 😊 Kayn chi 7aja khra n9der n3awnek fiha?",
    },
    "goodbye": {
        "en": "Goodbye! 👋 I hope you find what you're looking for.",
        "ar": "مع السلامة! 👋 أتمنى أن تجد ما تبحث عنه.",
        "darija": "Bslama! 👋 Nchallah tl9a dakchi li kat9elleb 3lih.",
    },
    "unknown": {
        "en": "I'm not sure I understood. I can help you report something missing, search reports or check your reports.",
        "ar": "لم أفهم جيدا. يمكنني مساعدتك في الإبلاغ عن مفقود أو البحث في البلاغات أو متابعة بلاغاتك.",
        "darija": "Ma fhemtch mzyan. N9der n3awnek tdir declaration, t9elleb f les declarations wla tchouf dyalek.",
    },
    "cancel": {
        "en": "No problem! I've cancelled the current operation. 🔄 What would you like to do now?",
        "ar": "لا مشكلة! لقد ألغيت العملية الحالية. 🔄 ماذا تريد أن تفعل الآن؟",
        "darija": "Mchi mochkil! Lghit dakchi li konna fih. 🔄 Chno bghiti dir daba?",
    },
    "restart": {
        "en": "Sorry, I lost track of our conversation. Let's start again. What would you like to do?",
        "ar": "عذرا، فقدت تسلسل المحادثة. لنبدأ من جديد. ماذا تريد أن تفعل؟",
        "darija": "Smeh liya, tlefli lhadra. Yallah nbdaw mn jdid. Chno bghiti dir?",
    },
    "retry": {
        "en": "😓 Sorry, I couldn't reach the reports service. Please try again in a moment.",
        "ar": "😓 عذرا، تعذر الوصول إلى خدمة البلاغات. يرجى المحاولة بعد قليل.",
        "darija": "😓 Smeh liya, ma9dertch nwssel l service. 3awed jerreb mn ba3d chwiya.",
    },
    "error": {
        "en": "I'm sorry, something went wrong. Please try again.",
        "ar": "عذرا، حدث خطأ ما. يرجى المحاولة مرة أخرى.",
        "darija": "Smeh liya, w9e3 chi mochkil. 3awed jerreb.",
    },
    "empty_message": {
        "en": "Please type a message or choose one of the options.",
        "ar": "يرجى كتابة رسالة أو اختيار أحد الخيارات.",
        "darija": "Kteb chi message wla khtar mn les choix.",
    },
    "message_too_long": {
        "en": "Your message is too long. Please keep it under {limit} characters.",
        "ar": "رسالتك طويلة جدا. يرجى ألا تتجاوز {limit} حرف.",
        "darija": "Lmessage twil bzaf. Khellih t7t {limit} 7arf.",
    },
    "emergency": {
        "en": "🚨 If someone is in danger, contact the authorities right away: Police 19, Emergency 15, SAMU 141.",
        "ar": "🚨 إذا كان أحد في خطر، اتصل بالسلطات فورا: الشرطة 19، الطوارئ 15، الإسعاف 141.",
        "darija": "🚨 Ila kan chi wa7ed f khatar, 3iyet l bolis daba: Police 19, Urgence 15, SAMU 141.",
    },
}

QUICK_REPLY_LABELS: Dict[str, Dict[str, str]] = {
    "report": {"en": "📝 Report missing", "ar": "📝 الإبلاغ عن مفقود", "darija": "📝 Dir declaration"},
    "search": {"en": "🔍 Search reports", "ar": "🔍 البحث في البلاغات", "darija": "🔍 9elleb"},
    "help": {"en": "ℹ️ Help", "ar": "ℹ️ مساعدة", "darija": "ℹ️ 3awni"},
    "cancel": {"en": "❌ Cancel", "ar": "❌ إلغاء", "darija": "❌ Annuler"},
    "skip": {"en": "⏭️ Skip", "ar": "⏭️ تخطي", "darija": "⏭️ Douz"},
    "done": {"en": "✅ Done, go to form", "ar": "✅ انتهيت، إلى النموذج", "darija": "✅ Salina, l formulaire"},
    "new_search": {"en": "🔍 New search", "ar": "🔍 بحث جديد", "darija": "🔍 9elleb mn jdid"},
    "filter": {"en": "🎯 Filter results", "ar": "🎯 تصفية النتائج", "darija": "🎯 Filtrer"},
    "create_report": {"en": "📝 Create report", "ar": "📝 إنشاء بلاغ", "darija": "📝 Dir declaration"},
    "retry": {"en": "🔄 Try again", "ar": "🔄 حاول مجددا", "darija": "🔄 3awed"},
    "my_reports": {"en": "📂 My reports", "ar": "📂 بلاغاتي", "darija": "📂 Declarations dyali"},
    "search_all": {"en": "🔎 All types", "ar": "🔎 كل الأنواع", "darija": "🔎 Ga3 l anwa3"},
}

TYPE_LABELS: Dict[ReportType, Dict[str, str]] = {
    ReportType.PERSON: {"en": "👤 Person", "ar": "👤 شخص", "darija": "👤 Chi wa7ed"},
    ReportType.PET: {"en": "🐾 Pet", "ar": "🐾 حيوان أليف", "darija": "🐾 7ayawan"},
    ReportType.DOCUMENT: {"en": "📄 Document", "ar": "📄 وثيقة", "darija": "📄 Wra9"},
    ReportType.ELECTRONICS: {"en": "📱 Electronics", "ar": "📱 جهاز إلكتروني", "darija": "📱 Jihaz"},
    ReportType.VEHICLE: {"en": "🚗 Vehicle", "ar": "🚗 مركبة", "darija": "🚗 Tomobil/moto"},
    ReportType.OTHER: {"en": "📦 Item", "ar": "📦 غرض", "darija": "📦 Chi 7aja"},
}

# Categories offered as search shortcuts
SEARCH_SHORTCUT_TYPES = [ReportType.PERSON, ReportType.PET, ReportType.DOCUMENT]


def get_message(key: str, language: Union[Language, str], **kwargs: Any) -> str:
    """
    Get a localized message.

    Args:
        key: Message key in MESSAGES
        language: Target language; missing translations fall back to English
        **kwargs: Values substituted into the template

    Returns:
        Formatted message text
    """
    text = localized(MESSAGES[key], language)
    return text.format(**kwargs) if kwargs else text


def type_label(report_type: Union[ReportType, str], language: Union[Language, str]) -> str:
    return localized(TYPE_LABELS[ReportType(report_type)], language)


def _reply(label_key: str, action: str, language: Union[Language, str],
           data: Optional[Dict[str, Any]] = None) -> QuickReply:
    return QuickReply(text=localized(QUICK_REPLY_LABELS[label_key], language), action=action, data=data)


def cancel_reply(language: Union[Language, str]) -> QuickReply:
    return _reply("cancel", "cancel", language)


def main_menu_replies(language: Union[Language, str]) -> List[QuickReply]:
    """Report / search / help entry points shown on greetings and resets"""
    return [
        _reply("report", "create_report", language),
        _reply("search", "search_reports", language),
        _reply("help", "platform_help", language),
    ]


def type_menu_replies(language: Union[Language, str]) -> List[QuickReply]:
    """One button per report category, plus cancel"""
    replies = [
        QuickReply(text=type_label(report_type, language), action="select_type",
                   data={"type": report_type.value})
        for report_type in ReportType
    ]
    replies.append(cancel_reply(language))
    return replies


def search_type_replies(language: Union[Language, str]) -> List[QuickReply]:
    """Category shortcuts offered when entering search"""
    replies = [
        QuickReply(text=type_label(report_type, language), action="search",
                   data={"type": report_type.value})
        for report_type in SEARCH_SHORTCUT_TYPES
    ]
    replies.append(_reply("search_all", "search", language, data={"type": None}))
    replies.append(cancel_reply(language))
    return replies


def search_results_replies(language: Union[Language, str]) -> List[QuickReply]:
    return [
        _reply("new_search", "search_reports", language),
        _reply("filter", "filter_search", language),
        cancel_reply(language),
    ]


def no_results_replies(language: Union[Language, str]) -> List[QuickReply]:
    return [
        _reply("new_search", "search_reports", language),
        _reply("create_report", "create_report", language),
        cancel_reply(language),
    ]


def retry_replies(language: Union[Language, str], action: str,
                  data: Optional[Dict[str, Any]] = None) -> List[QuickReply]:
    """Retry button repeating the failed action, plus cancel"""
    return [_reply("retry", action, language, data=data), cancel_reply(language)]


def status_replies(language: Union[Language, str]) -> List[QuickReply]:
    return [
        _reply("create_report", "create_report", language),
        _reply("search", "search_reports", language),
    ]


def with_emergency(text: str, language: Union[Language, str]) -> str:
    """Prefix a reply with the emergency numbers"""
    return f"{get_message('emergency', language)}\n\n{text}"
