from dataclasses import dataclass, field
import os
import re
from typing import Pattern, Tuple

TagName = str


@dataclass
class SdfMetaModel:
    """Vocabulary of the SDF dialect as consumed by the loader."""
    root_tags: Tuple[TagName, ...] = ("sdf", "gazebo")
    scope_tags: Tuple[TagName, ...] = ("world", "model")
    include_tag: TagName = "include"
    include_override_tags: Tuple[TagName, ...] = ("static", "pose")
    model_config: str = "model.config"
    model_path_env: str = "GAZEBO_MODEL_PATH"
    home_models_dir: Tuple[str, ...] = (".gazebo", "models")
    model_uri: Pattern[str] = field(default_factory=lambda: re.compile(r"^model://([^/]+)(?:/(.*))?"))

    @property
    def root_tag(self) -> TagName:
        return self.root_tags[0]

    def is_root_tag(self, tag: TagName) -> bool:
        return tag in self.root_tags

    def is_scope_tag(self, tag: TagName) -> bool:
        return tag in self.scope_tags

    def default_model_path(self) -> list[str]:
        """Search path from the environment, followed by the per-user model directory."""
        env = os.environ.get(self.model_path_env, "")
        paths = [p for p in env.split(os.pathsep) if p]
        paths.append(os.path.join(os.path.expanduser("~"), *self.home_models_dir))
        return paths
