"""Bilingual user-facing strings."""

from typing import Literal, cast

from liquidtrack.domain.issues import IssueStatus

Language = Literal["en", "ru"]

LANGUAGES: tuple[Language, ...] = ("en", "ru")

TRANSLATIONS: dict[Language, dict[str, object]] = {
    "en": {
        "app_title": "LiquidTrack",
        "new_issue": "New Issue",
        "search_placeholder": "Search issues...",
        "active_records": "active records",
        "empty_state": "No issues found. Create a new one to get started.",
        "loading": "Loading...",
        "load_error": "Could not refresh issues. Showing the last known data.",
        "table_headers": {
            "issue": "Issue",
            "status": "Status",
            "date": "Date",
            "responsible": "Responsible",
            "actions": "Actions",
        },
        "buttons": {
            "delete": "Delete Issue",
            "ai_suggest": "Get AI Suggestion",
            "ai_busy": "Analyzing...",
            "cancel": "Cancel",
            "create": "Create Record",
            "logout": "Sign out",
            "search": "Search",
        },
        "modal": {
            "title": "New Issue Record",
            "label_title": "Problem Title",
            "placeholder_title": "e.g. Spare part delivery delay",
            "label_desc": "Description",
            "placeholder_desc": "Describe the situation...",
            "label_responsible": "Responsible Person",
            "required": "Title and description are required.",
        },
        "statuses": {
            IssueStatus.NEW: "New",
            IssueStatus.IN_PROGRESS: "In Progress",
            IssueStatus.CUSTOMS: "At Customs",
            IssueStatus.DELIVERY: "Delivery",
            IssueStatus.DONE: "Done",
            IssueStatus.STUCK: "Stuck",
        },
        "confirm_delete": "Are you sure you want to delete this record?",
        "alerts": {
            "create_failed": "Failed to add issue",
        },
        "auth": {
            "welcome": "Sign in to continue",
            "email": "Email",
            "password": "Password",
            "sign_in": "Sign In",
            "sign_up": "Sign Up",
            "no_account": "Don't have an account?",
            "has_account": "Already have an account?",
            "or": "or",
            "microsoft_btn": "Continue with Microsoft",
            "microsoft_failed": (
                "Microsoft Login requires Azure configuration in Supabase Dashboard."
            ),
            "check_email": "Check your email to confirm the account.",
            "error_params": "Invalid email or password.",
        },
        "setup": {
            "title": "Database Connection Missing",
            "body": "To enable cloud sync, please connect Supabase.",
            "step_create": "1. Create a project at supabase.com",
            "step_env": (
                "2. Set SUPABASE_URL and SUPABASE_ANON_KEY in the environment."
            ),
            "step_sql": "3. Run this SQL in the Supabase SQL Editor:",
        },
        "advice": {
            "missing_key": "API Key configuration required.",
            "unavailable": "AI Service unavailable at the moment.",
            "empty": "No analysis available.",
        },
        "locale": "en-US",
        "date_format": "%m/%d/%Y",
    },
    "ru": {
        "app_title": "LiquidTrack",
        "new_issue": "Новая задача",
        "search_placeholder": "Поиск проблем...",
        "active_records": "активных задач",
        "empty_state": "Задач нет. Создайте новую, чтобы начать.",
        "loading": "Загрузка...",
        "load_error": "Не удалось обновить задачи. Показаны последние данные.",
        "table_headers": {
            "issue": "Проблема",
            "status": "Статус",
            "date": "Дата",
            "responsible": "Ответственный",
            "actions": "Действия",
        },
        "buttons": {
            "delete": "Удалить",
            "ai_suggest": "Анализ AI",
            "ai_busy": "Анализ...",
            "cancel": "Отмена",
            "create": "Создать запись",
            "logout": "Выйти",
            "search": "Найти",
        },
        "modal": {
            "title": "Новая запись о проблеме",
            "label_title": "Заголовок проблемы",
            "placeholder_title": "например, Задержка запчасти",
            "label_desc": "Описание",
            "placeholder_desc": "Опишите ситуацию подробно...",
            "label_responsible": "Ответственный сотрудник",
            "required": "Заголовок и описание обязательны.",
        },
        "statuses": {
            IssueStatus.NEW: "Новая",
            IssueStatus.IN_PROGRESS: "В работе",
            IssueStatus.CUSTOMS: "На таможне",
            IssueStatus.DELIVERY: "Доставка",
            IssueStatus.DONE: "Готово",
            IssueStatus.STUCK: "Проблема",
        },
        "confirm_delete": "Вы уверены, что хотите удалить эту запись?",
        "alerts": {
            "create_failed": "Не удалось добавить задачу",
        },
        "auth": {
            "welcome": "Войдите, чтобы продолжить",
            "email": "Эл. почта",
            "password": "Пароль",
            "sign_in": "Войти",
            "sign_up": "Регистрация",
            "no_account": "Нет аккаунта?",
            "has_account": "Уже есть аккаунт?",
            "or": "или",
            "microsoft_btn": "Войти через Microsoft",
            "microsoft_failed": (
                "Для входа через Microsoft нужна настройка Azure в Supabase."
            ),
            "check_email": "Проверьте почту, чтобы подтвердить аккаунт.",
            "error_params": "Неверная почта или пароль.",
        },
        "setup": {
            "title": "Нет подключения к базе данных",
            "body": "Чтобы включить облачную синхронизацию, подключите Supabase.",
            "step_create": "1. Создайте проект на supabase.com",
            "step_env": "2. Задайте SUPABASE_URL и SUPABASE_ANON_KEY в окружении.",
            "step_sql": "3. Выполните этот SQL в редакторе Supabase:",
        },
        "advice": {
            "missing_key": "Требуется настройка ключа API.",
            "unavailable": "Сервис AI временно недоступен.",
            "empty": "Нет анализа.",
        },
        "locale": "ru-RU",
        "date_format": "%d.%m.%Y",
    },
}


def coerce_language(raw: str | None, default: Language = "ru") -> Language:
    """Return a supported language code, falling back to the default."""
    if raw in LANGUAGES:
        return raw  # type: ignore[return-value]
    return default


def toggle_language(language: Language) -> Language:
    """Return the other supported language."""
    return "ru" if language == "en" else "en"


def text(language: Language, key: str) -> str:
    """Look up a dotted key, e.g. ``buttons.delete``."""
    node: object = TRANSLATIONS[language]
    for part in key.split("."):
        if not isinstance(node, dict):
            raise KeyError(key)
        node = node[part]
    if not isinstance(node, str):
        raise KeyError(key)
    return node


def status_label(language: Language, status: IssueStatus) -> str:
    """Return the localized label for an issue status."""
    statuses = cast(dict[IssueStatus, str], TRANSLATIONS[language]["statuses"])
    return statuses[status]


def advice_name(language: Language) -> str:
    """Return the language name used when prompting the LLM."""
    return "RUSSIAN" if language == "ru" else "ENGLISH"
