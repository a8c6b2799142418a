from sprintboard.models.projects import (  # noqa: F401
    Epic,
    EpicCategory,
    EpicStatus,
    Project,
    ProjectPriority,
    ProjectStatus,
    Sprint,
    SprintStatus,
    Task,
    TaskStatus,
)
from sprintboard.models.tickets import (  # noqa: F401
    Ticket,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)
from sprintboard.models.workspaces import (  # noqa: F401
    ProjectTeam,
    Team,
    TeamMember,
    TeamRole,
    Workspace,
    WorkspaceMember,
    WorkspaceRole,
)
