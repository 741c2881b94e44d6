class DuelError(Exception):
    code = "E_DUEL"


class DuelNotFoundError(DuelError):
    code = "E_DUEL_NOT_FOUND"


class SubjectNotFoundError(DuelNotFoundError):
    code = "E_SUBJECT_NOT_FOUND"


class LevelNotFoundError(DuelNotFoundError):
    code = "E_LEVEL_NOT_FOUND"


class DuelParticipantNotFoundError(DuelNotFoundError):
    code = "E_DUEL_PARTICIPANT_NOT_FOUND"


class DuelValidationError(DuelError):
    code = "E_DUEL_VALIDATION"


class DuelLevelMismatchError(DuelValidationError):
    code = "E_DUEL_LEVEL_MISMATCH"


class DuelQuestionMismatchError(DuelValidationError):
    code = "E_DUEL_QUESTION_MISMATCH"


class DuelAccessError(DuelError):
    code = "E_DUEL_FORBIDDEN"


class DuelNotParticipantError(DuelAccessError):
    code = "E_DUEL_NOT_PARTICIPANT"


class DuelCreateNotAllowedError(DuelAccessError):
    code = "E_DUEL_CREATE_NOT_ALLOWED"


class DuelNotClassmatesError(DuelAccessError):
    code = "E_DUEL_NOT_CLASSMATES"


class DuelConflictError(DuelError):
    code = "E_DUEL_CONFLICT"


class DuelNotPendingError(DuelConflictError):
    code = "E_DUEL_NOT_PENDING"


class DuelNotActiveError(DuelConflictError):
    code = "E_DUEL_NOT_ACTIVE"


class DuelAlreadyCompletedError(DuelConflictError):
    code = "E_DUEL_ALREADY_COMPLETED"


class DuelAlreadyParticipantError(DuelConflictError):
    code = "E_DUEL_ALREADY_PARTICIPANT"


class DuelFullError(DuelConflictError):
    code = "E_DUEL_FULL"


class DuelInvitationMissingError(DuelConflictError):
    code = "E_DUEL_INVITATION_MISSING"


class DuelAlreadyStartedError(DuelConflictError):
    code = "E_DUEL_ALREADY_STARTED"


class DuelNotEnoughParticipantsError(DuelConflictError):
    code = "E_DUEL_NOT_ENOUGH_PARTICIPANTS"


class DuelRoundClosedError(DuelConflictError):
    code = "E_DUEL_ROUND_CLOSED"


class DuelAnswerAlreadySubmittedError(DuelConflictError):
    code = "E_DUEL_ANSWER_ALREADY_SUBMITTED"


class DuelQuestionPoolExhaustedError(DuelError):
    code = "E_DUEL_QUESTION_POOL_EXHAUSTED"


class UserNotFoundError(DuelNotFoundError):
    code = "E_USER_NOT_FOUND"


class DuelBestOfTooLargeError(DuelValidationError):
    code = "E_DUEL_BEST_OF_TOO_LARGE"
