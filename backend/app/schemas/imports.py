from pydantic import BaseModel


class QueueStatusOut(BaseModel):
    queue_length: int
    is_processing: bool
    rate_limit_delay: float


class ImportJobOut(BaseModel):
    job_id: str
    kind: str
    status: str
    total: int
    completed: int
    progress: int
    successful: int
    failed: int
    error: str | None = None
    created_at: str
    finished_at: str | None = None
    results: list[dict] | None = None
