"""Subprocess bridge that executes JavaScript modules under node."""

from __future__ import annotations

import asyncio
import contextlib
import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..errors import DynamicEvaluationError, EvaluationTimeoutError, TranspilerUnavailable
from ..logging import get_logger

logger = get_logger("evaluator.node")

RESULT_MARKER = "__TOKENSCOUT_RESULT__"

# Imports the target with a cache-busting URL, invokes a factory export once and
# prints one JSON document after the result marker. Console output from the
# module goes to stderr. Functions and symbols are dropped from the output.
_LOADER = r"""
const { pathToFileURL } = require("url");
const target = process.argv[process.argv.length - 1];
const MARKER = "__TOKENSCOUT_RESULT__";
for (const name of ["log", "info", "debug"]) {
  console[name] = (...args) => console.error(...args);
}
const encode = (payload) => JSON.stringify(payload, (key, value) => {
  if (typeof value === "function" || typeof value === "symbol") return undefined;
  if (typeof value === "bigint") return value.toString();
  return value;
});
const emit = (payload, code) => {
  process.stdout.write("\n" + MARKER + "\n" + encode(payload), () => process.exit(code));
};
(async () => {
  const mod = await import(pathToFileURL(target).href + "?t=" + Date.now());
  let value = mod && mod.default !== undefined ? mod.default : mod;
  if (value && typeof value === "object" && value.__esModule && value.default !== undefined) {
    value = value.default;
  }
  let factoryError = null;
  if (typeof value === "function") {
    try {
      value = await value();
    } catch (err) {
      factoryError = String((err && err.message) || err);
      value = null;
    }
  }
  emit({ ok: true, factoryError, value: value === undefined ? null : value }, 0);
})().catch((err) => {
  emit({ ok: false, error: String((err && err.message) || err) }, 1);
});
"""

_TS_TRANSPILE = r"""
const fs = require("fs");
const ts = require(require.resolve("typescript", { paths: [process.cwd()] }));
const source = fs.readFileSync(process.argv[process.argv.length - 1], "utf8");
process.stdout.write(ts.transpile(source, {
  module: ts.ModuleKind.ES2020,
  target: ts.ScriptTarget.ES2020,
}));
"""


@dataclass
class ModuleOutcome:
    """Value exported by a module, plus the error raised by its factory if any."""

    value: Any
    factory_error: Optional[str] = None


def find_node(node_binary: str = "node") -> Optional[str]:
    return shutil.which(node_binary)


async def run_module(
    path: Path,
    *,
    timeout: float,
    node_binary: str = "node",
) -> ModuleOutcome:
    """Execute ``path`` in a fresh node process and return its exported value."""
    node = find_node(node_binary)
    if node is None:
        raise DynamicEvaluationError(f"node executable '{node_binary}' not found")

    stdout = await _communicate(
        [node, "-e", _LOADER, str(path)],
        cwd=path.parent,
        timeout=timeout,
        label=str(path),
    )
    _, marker, document = stdout.rpartition(RESULT_MARKER)
    if not marker:
        raise DynamicEvaluationError(f"node produced no result for {path.name}")
    try:
        payload = json.loads(document.strip() or "null")
    except json.JSONDecodeError as exc:
        raise DynamicEvaluationError(f"node produced unreadable output for {path.name}") from exc
    if not isinstance(payload, dict):
        raise DynamicEvaluationError(f"node produced no result for {path.name}")
    if not payload.get("ok"):
        raise DynamicEvaluationError(str(payload.get("error") or "module evaluation failed"))
    return ModuleOutcome(value=payload.get("value"), factory_error=payload.get("factoryError"))


async def transpile_typescript(
    path: Path,
    *,
    project_root: Path,
    timeout: float,
    node_binary: str = "node",
) -> str:
    """Return plain JavaScript for ``path`` using esbuild or the typescript package."""
    command = find_transpiler(path, project_root=project_root, node_binary=node_binary)
    if command is None:
        raise TranspilerUnavailable("no TypeScript transpiler available")
    return await _communicate(command, cwd=project_root, timeout=timeout, label=str(path))


def find_transpiler(
    path: Path,
    *,
    project_root: Path,
    node_binary: str = "node",
) -> Optional[List[str]]:
    esbuild = _local_bin(project_root, "esbuild") or shutil.which("esbuild")
    if esbuild is not None:
        return [esbuild, str(path), "--format=esm", "--platform=node", "--log-level=error"]
    node = find_node(node_binary)
    if node is not None and (project_root / "node_modules" / "typescript").is_dir():
        return [node, "-e", _TS_TRANSPILE, str(path)]
    return None


def _local_bin(project_root: Path, name: str) -> Optional[str]:
    candidate = project_root / "node_modules" / ".bin" / name
    return str(candidate) if candidate.is_file() else None


async def _communicate(
    command: Sequence[str],
    *,
    cwd: Path,
    timeout: float,
    label: str,
) -> str:
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise DynamicEvaluationError(f"failed to start {command[0]}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        raise EvaluationTimeoutError(f"evaluation timed out after {timeout:.1f}s: {label}") from exc

    if stderr:
        logger.debug("%s stderr: %s", command[0], stderr.decode("utf-8", errors="replace").strip())
    output = stdout.decode("utf-8", errors="replace")
    if process.returncode not in (0, None) and not output.strip():
        message = stderr.decode("utf-8", errors="replace").strip().splitlines()
        raise DynamicEvaluationError(message[-1] if message else f"exit code {process.returncode}")
    return output


__all__ = ["ModuleOutcome", "find_node", "find_transpiler", "run_module", "transpile_typescript"]
