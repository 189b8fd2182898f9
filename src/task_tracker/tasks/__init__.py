"""
Task subsystem.

Components:
- task_models.py: entities (Task, Project, TaskStatus, Priority) + JSON record codec
- store_base.py: generic in-memory / JSON-file stores and StoreError
- task_store.py, project_store.py: concrete stores
- task_filters.py: composable task filters
- task_export.py: CSV / JSON / Markdown exporters
- task_reminders.py: due-date reminder pass
- task_api.py: small high-level helpers used by the rest of the app
"""
