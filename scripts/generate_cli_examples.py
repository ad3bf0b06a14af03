from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--export-only", "--export-width", "480", "--export-height", "270"]


@dataclass
class Example:
    name: str
    args: list[str]

    @property
    def output(self) -> Path:
        extension = "png"
        if "--format" in self.args:
            extension = self.args[self.args.index("--format") + 1]
        return EXAMPLES_ROOT / self.name / f"{self.name}.{extension}"

    def full_args(self) -> list[str]:
        return ["python", "explore.py", *BASE_ARGS, *self.args, "--output", str(self.output)]


EXAMPLES: list[Example] = [
    *(Example(name=f"palette-{name}", args=["--palette", name])
      for name in ("default", "fire", "rainbow", "ocean", "grayscale", "electric")),
    Example(name="max-iterations", args=["--max-iterations", "400"]),
    Example(name="scale", args=["--scale", "12", "--center-x", "-0.7453", "--center-y", "0.1127"]),
    Example(name="julia", args=["--fractal", "julia"]),
    Example(name="julia-constant", args=["--fractal", "julia", "--julia-real", "0.285", "--julia-imag", "0.01"]),
    Example(name="format", args=["--format", "jpg"]),
]


def run_example(example: Example) -> None:
    target_dir = example.output.parent
    if target_dir.exists():
        shutil.rmtree(target_dir)
    output = example.output
    args = example.full_args()
    print(f"[{example.name}] {' '.join(args)}")
    subprocess.run(args, check=True)
    if not output.exists():
        raise FileNotFoundError(f"{example.name}: expected {output}")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        run_example(example)


if __name__ == "__main__":
    main()
