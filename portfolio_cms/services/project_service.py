from portfolio_cms.models.project import Project
from portfolio_cms.services.results import ServiceResult

_FIELDS = (
    "title",
    "description",
    "technology_stack",
    "project_url",
    "github_url",
    "image_url",
    "completed_at",
    "display_order",
    "is_active",
)


class ProjectService:
    """Project CRUD. No workflow: `is_active` hides a project, `display_order` sorts it."""

    def __init__(self, uow, events):
        self.uow = uow
        self.events = events

    def list_projects(self, active_only=True):
        return [p.to_dict() for p in self.uow.projects.ordered(active_only=active_only)]

    def get_project(self, project_id, active_only=False):
        project = self.uow.projects.get(project_id)
        if project is None or (active_only and not project.is_active):
            return ServiceResult.not_found("Project not found")
        return ServiceResult.ok(project.to_dict())

    def create_project(self, fields, caller_id=None):
        with self.uow.transaction():
            project = self.uow.projects.add(Project(**{k: fields[k] for k in _FIELDS if k in fields}))

        self.events.emit("ProjectCreated", project_id=project.id, title=project.title, caller_id=caller_id)
        return ServiceResult.ok(project.to_dict(), "Project created successfully")

    def update_project(self, project_id, fields, caller_id=None):
        project = self.uow.projects.get(project_id)
        if project is None:
            return ServiceResult.not_found("Project not found")

        with self.uow.transaction():
            for name in _FIELDS:
                if name in fields:
                    setattr(project, name, fields[name])

        self.events.emit("ProjectUpdated", project_id=project.id, title=project.title, caller_id=caller_id)
        return ServiceResult.ok(project.to_dict(), "Project updated successfully")

    def delete_project(self, project_id, caller_id=None):
        project = self.uow.projects.get(project_id)
        if project is None:
            return ServiceResult.not_found("Project not found")

        title = project.title
        with self.uow.transaction():
            # media rows keep existing with project_id = NULL (orphans)
            self.uow.projects.delete(project)

        self.events.emit("ProjectDeleted", project_id=project_id, title=title, caller_id=caller_id)
        return ServiceResult.ok(message="Project deleted successfully")
