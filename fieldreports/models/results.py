"""Operation results and the user-facing error taxonomy.

Services never raise past their boundary: remote failures are caught,
logged, and returned as a result carrying one of the `ErrorKind` values.
"""

from typing import Literal

from pydantic import BaseModel

ErrorKind = Literal[
    "invalid-input",
    "invalid-credentials",
    "account-disabled",
    "not-authorized",
    "conflict",
    "not-implemented",
    "transient-read-failure",
    "write-failure",
]

# Login
MISSING_PASSWORD = "Password mancante."
INVALID_CREDENTIALS = "Nome utente o password non corretti."
ACCOUNT_DISABLED = "Questo account è stato disabilitato."
GOOGLE_NO_EMAIL = "Impossibile ottenere l'email dal tuo account Google."
GOOGLE_NOT_AUTHORIZED = "Il tuo account Google non è autorizzato ad accedere."
GOOGLE_POPUP_CLOSED = "La finestra di accesso è stata chiusa."
GOOGLE_LOGIN_FAILED = "Accesso con Google non riuscito."

# Reports
REPORT_SAVE_FAILED = "Errore durante il salvataggio."
REPORT_UPDATE_FAILED = "Errore durante l'aggiornamento."
REPORT_DELETE_FAILED = "Errore durante l'eliminazione."
REPORT_NOT_OWNED = "Non hai i permessi per modificare questo report."
SAVE_IN_PROGRESS = "Salvataggio già in corso."

# User administration
USERNAME_REQUIRED = "Il nome utente è obbligatorio."
EMAIL_REQUIRED = "L'email è obbligatoria."
PASSWORD_TOO_SHORT = (
    "La password è obbligatoria e deve essere di almeno 6 caratteri."
)
USERNAME_TAKEN = "Questo nome utente è già in uso."
EMAIL_TAKEN = "Questa email è già stata registrata."
EMAIL_MALFORMED = "Il formato dell'email non è valido."
USER_CREATE_FAILED = "Impossibile creare l'utente. Riprova."
USER_UPDATE_FAILED = "Errore durante l'aggiornamento dell'utente."
USER_DELETE_FAILED = "Errore durante l'eliminazione dei dati utente."
USER_DELETE_WARNING = (
    "L'account di accesso dovrà essere rimosso separatamente "
    "dalla console Firebase."
)
PASSWORD_CHANGE_NOT_IMPLEMENTED = (
    "Funzione non implementata. Per motivi di sicurezza, questa operazione "
    "richiede una configurazione lato server (Firebase Cloud Function)."
)
PASSWORD_MISMATCH = "Le password non coincidono."
PASSWORD_MIN_LENGTH = "La password deve essere di almeno 6 caratteri."

# Google allow-list
EMAIL_INVALID = "Inserisci un indirizzo email valido."
AUTHORIZE_FAILED = "Errore durante l'autorizzazione."
REVOKE_FAILED = "Errore durante la revoca."

MIN_PASSWORD_LENGTH = 6


class OperationResult(BaseModel):
    """Outcome of a store-backed operation."""

    success: bool
    message: str | None = None
    error: ErrorKind | None = None
    id: str | None = None

    @classmethod
    def ok(cls, id: str | None = None) -> "OperationResult":
        return cls(success=True, id=id)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, error=error, message=message)


class AuthResult(BaseModel):
    """Outcome of a sign-in attempt."""

    success: bool
    reason: str | None = None
    error: ErrorKind | None = None

    @classmethod
    def ok(cls) -> "AuthResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: ErrorKind, reason: str) -> "AuthResult":
        return cls(success=False, error=error, reason=reason)
