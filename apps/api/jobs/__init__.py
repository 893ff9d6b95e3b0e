"""Background job hand-off and worker functions."""

from apps.api.jobs.dispatcher import (
    ArqJobSink,
    Job,
    JobDispatcher,
    JobSink,
    ThumbnailJob,
    WelcomeJob,
)

__all__ = [
    "ArqJobSink",
    "Job",
    "JobDispatcher",
    "JobSink",
    "ThumbnailJob",
    "WelcomeJob",
]
