"""
FastAPI task-tracking backend package.

The application instance lives in `task_api.main` (`app`, or `create_app()`
for a custom Settings object).
"""
