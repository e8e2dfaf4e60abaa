from app.models.discipline import (  # noqa: F401
    CategorySeverity,
    DeliveryMethod,
    DisciplinaryWarning,
    Employee,
    Organization,
    ReviewOutcome,
    WarningCategory,
    WarningLevel,
    WarningStatus,
)
