# TaskTime - time tracking for project tasks
