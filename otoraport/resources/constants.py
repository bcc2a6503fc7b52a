# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Resource constants.

User-facing messages are in Polish; log messages are in English and use
%-style placeholders.
"""

# Error messages for resources
ERROR_VALIDATION = "Validation error"
ERROR_VALIDATION_LOG = "Validation error: %s"
ERROR_INTEGRITY = "Integrity error"
ERROR_INTEGRITY_LOG = "Integrity error: %s"
ERROR_DATABASE = "Database error"
ERROR_DATABASE_LOG = "Database error: %s"
MSG_NO_INPUT_DATA = "No input data provided"
MSG_INVALID_PAGINATION = "Invalid pagination parameters"
MSG_LIMIT_TOO_SMALL = "Limit must be greater than 0"
MSG_OFFSET_NEGATIVE = "Offset must be greater than or equal to 0"

# Developer
MSG_DEVELOPER_NOT_FOUND = "Nie znaleziono konta dewelopera"
LOG_DEVELOPER_NOT_FOUND = "Developer not found: %s"
LOG_UPDATING_PROFILE = "Updating profile of developer %s"
MSG_ONBOARDING_COMPLETED = "Konfiguracja konta zakończona"

# Auth
MSG_REGISTERED = "Konto zostało utworzone"
MSG_LOGGED_IN = "Zalogowano"
MSG_LOGGED_OUT = "Wylogowano"
MSG_MAGIC_LINK_SENT = "Jeśli konto istnieje, wysłaliśmy link logowania na podany adres"
MSG_MISSING_TOKEN = "Brak tokenu logowania"
MSG_MISSING_CODE = "Brak kodu autoryzacji"
MSG_OAUTH_NOT_CONFIGURED = "Logowanie przez Google nie jest skonfigurowane"
MSG_OAUTH_STATE_MISMATCH = "Nieprawidłowy parametr state"
OAUTH_STATE_COOKIE = "oauth_state"

# Projects
MSG_PROJECT_NOT_FOUND = "Nie znaleziono projektu"
MSG_PROJECT_DELETED = "Projekt został usunięty"
LOG_PROJECT_NOT_FOUND = "Project not found: %s"
LOG_PROJECT_CREATED = "Project created: %s"
LOG_PROJECT_UPDATED = "Project updated: %s"
LOG_PROJECT_DELETED = "Project deleted: %s"

# Properties
MSG_PROPERTY_NOT_FOUND = "Nie znaleziono nieruchomości"
MSG_PROPERTY_DELETED = "Nieruchomość została usunięta"
MSG_INVALID_STATUS_FILTER = "Nieprawidłowy status"
LOG_PROPERTY_NOT_FOUND = "Property not found: %s"
LOG_PROPERTY_UPDATED = "Property updated: %s"
LOG_PROPERTY_DELETED = "Property deleted: %s"

# Upload
MSG_NO_FILE = "Nie przesłano pliku"
MSG_EMPTY_FILE = "Przesłany plik jest pusty"
MSG_UNSUPPORTED_FILE = "Obsługiwane są tylko pliki CSV"
MSG_PARSE_FAILED = "Nie udało się rozpoznać kolumn cennika"
MSG_NOT_COMPLIANT = "Dane nie spełniają wymagań ministerstwa"
MSG_UPLOAD_SUCCESS = "Cennik został zaimportowany"
ALLOWED_UPLOAD_EXTENSIONS = (".csv", ".txt")
UPLOAD_PREVIEW_ROWS = 10

# Public files
MSG_INVALID_CLIENT_ID = "Nieprawidłowy identyfikator klienta"
MSG_CLIENT_NOT_FOUND = "Nie znaleziono dewelopera"
MSG_NO_PROPERTIES = "Brak danych nieruchomości dla tego dewelopera"
PUBLIC_CACHE_CONTROL = "public, max-age=3600"

# Regeneration
MSG_REGENERATED = "Pliki zostały wygenerowane ponownie"

# Payments
MSG_PAYMENT_NOT_FOUND = "Nie znaleziono płatności"
MSG_PAYMENT_FAILED = "Nie udało się zarejestrować płatności"
MSG_PAYMENT_VERIFICATION_FAILED = "Weryfikacja płatności nie powiodła się"
MSG_MISSING_WEBHOOK_PARAMS = "Brak wymaganych parametrów"

# Ministry
MSG_MINISTRY_NO_DATA = "Najpierw prześlij cennik, aby wygenerować pliki"
MSG_MINISTRY_EMAIL_FAILED = "Nie udało się wysłać wiadomości do ministerstwa"
MSG_MINISTRY_NOTIFIED = "Wysłano zgłoszenie do ministerstwa"
MSG_MINISTRY_APPROVED = "Rejestracja w ministerstwie została zatwierdzona"
MSG_MINISTRY_REJECTED = "Rejestracja w ministerstwie została odrzucona"
MSG_MINISTRY_CONFIRM_INVALID = "Wymagane pola: developer_id, approved"

# Analytics
MSG_INVALID_REPORT_TYPE = "Nieprawidłowy typ raportu"
MSG_INVALID_TIMEFRAME = "Nieprawidłowy zakres czasu"
