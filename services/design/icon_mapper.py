"""Keyword -> Heroicon name lookup."""
from typing import List, Sequence

DEFAULT_ICON = "StarIcon"

ICON_SEMANTIC_MAP = {
    # Growth & progress
    "growth": "RocketLaunchIcon",
    "progress": "ChartBarIcon",
    "success": "CheckCircleIcon",
    "achievement": "TrophyIcon",
    "target": "FlagIcon",
    # Security
    "security": "ShieldCheckIcon",
    "protection": "LockClosedIcon",
    "safe": "ShieldExclamationIcon",
    "privacy": "EyeSlashIcon",
    # People
    "team": "UserGroupIcon",
    "people": "UsersIcon",
    "user": "UserIcon",
    "profile": "UserCircleIcon",
    "community": "UserGroupIcon",
    # Emotion
    "love": "HeartIcon",
    "favorite": "HeartIcon",
    "like": "HandThumbUpIcon",
    "happy": "FaceSmileIcon",
    "celebrate": "SparklesIcon",
    # Data
    "data": "ChartBarIcon",
    "analytics": "ChartPieIcon",
    "graph": "PresentationChartLineIcon",
    "report": "DocumentChartBarIcon",
    "stats": "ChartBarSquareIcon",
    # Energy
    "light": "SunIcon",
    "bright": "BoltIcon",
    "energy": "BoltIcon",
    "power": "FireIcon",
    "spark": "SparklesIcon",
    # Communication
    "message": "ChatBubbleLeftIcon",
    "chat": "ChatBubbleOvalLeftEllipsisIcon",
    "email": "EnvelopeIcon",
    "notification": "BellIcon",
    "announcement": "MegaphoneIcon",
    # Time
    "time": "ClockIcon",
    "deadline": "ClockIcon",
    "calendar": "CalendarIcon",
    "schedule": "CalendarDaysIcon",
    # Places
    "location": "MapPinIcon",
    "map": "MapIcon",
    "travel": "GlobeAltIcon",
    "world": "GlobeAmericasIcon",
    # Money
    "money": "CurrencyDollarIcon",
    "finance": "BanknotesIcon",
    "payment": "CreditCardIcon",
    "price": "ReceiptPercentIcon",
    # Technology
    "tech": "ComputerDesktopIcon",
    "mobile": "DevicePhoneMobileIcon",
    "code": "CodeBracketIcon",
    "api": "CommandLineIcon",
    "cloud": "CloudIcon",
    # Actions
    "action": "PlayIcon",
    "start": "ArrowRightIcon",
    "go": "ArrowRightCircleIcon",
    "forward": "ForwardIcon",
    "back": "BackwardIcon",
    # Media
    "photo": "PhotoIcon",
    "image": "PhotoIcon",
    "video": "VideoCameraIcon",
    "music": "MusicalNoteIcon",
    # Learning
    "learn": "AcademicCapIcon",
    "education": "BookOpenIcon",
    "study": "BookmarkIcon",
    "knowledge": "LightBulbIcon",
    # Commerce
    "shop": "ShoppingBagIcon",
    "cart": "ShoppingCartIcon",
    "store": "BuildingStorefrontIcon",
    # Tools
    "settings": "Cog6ToothIcon",
    "tools": "WrenchScrewdriverIcon",
    "edit": "PencilIcon",
    "delete": "TrashIcon",
    "add": "PlusCircleIcon",
    # Status
    "check": "CheckIcon",
    "error": "ExclamationTriangleIcon",
    "warning": "ExclamationCircleIcon",
    "info": "InformationCircleIcon",
    # Nature
    "nature": "SparklesIcon",
    "leaf": "SparklesIcon",
    "flower": "SparklesIcon",
    "tree": "GlobeAltIcon",
    "default": DEFAULT_ICON,
}


def get_icon_for_keyword(keyword: str) -> str:
    normalized = (keyword or "").strip().lower()
    return ICON_SEMANTIC_MAP.get(normalized, DEFAULT_ICON)


def get_icons_for_keywords(keywords: Sequence[str]) -> List[str]:
    return [get_icon_for_keyword(keyword) for keyword in keywords]
