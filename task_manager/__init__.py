"""Task Manager: projects, tasks, people and planning views over a REST API."""
