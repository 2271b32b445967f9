from .env_expansion import expand_env_vars

__all__: list[str] = ["expand_env_vars"]
