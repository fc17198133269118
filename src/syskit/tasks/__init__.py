"""
Periodic task subsystem ("run every N minutes", file-backed).

Components:
- interval.py: interval-string parser ("5 minutes" -> 300)
- task_models.py: data structures (TaskRecord, RunOutcome)
- task_store.py: JSON shared-state file keyed by task name
- task_runner.py: run_every gate logic
- task_scheduler.py: polling loop over registered jobs
"""
