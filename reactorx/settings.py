from pydantic_settings import BaseSettings


class SolverSettings(BaseSettings):
    # Newton iteration
    max_iterations: int = 50
    tolerance: float = 1e-4
    derivative_step_K: float = 0.01
    flat_derivative: float = 1e-10
    nudge_step_K: float = 10.0
    max_step_K: float = 100.0
    initial_offset_K: float = 100.0
    min_offset_K: float = 1.0

    # Stage chaining
    stage_limit: int = 5
    completion_cutoff: float = 0.99

    # Single-point evaluation and charts
    intersection_tolerance: float = 0.01
    curve_span_K: float = 500.0
    curve_step_K: float = 10.0

    log_level: str = "INFO"

    class Config:
        env_prefix = "REACTORX_"


settings = SolverSettings()
