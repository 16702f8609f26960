"""astgen/writer.py – Wrap emitted lines into a complete C++ artifact.

The emitters in :mod:`astgen.codegen` only produce the body of the
visitor. This module adds the license banner, include guard, includes,
namespace and class declaration around it and persists the result.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Union

from astgen.codegen import GeneratorConfig
from astgen.errors import SourceSpan, WriteError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_BANNER",
    "render_header",
    "render_source",
    "write_artifact",
]

DEFAULT_BANNER = """\
// Generated by astgen. Do not edit.
//
// Permission is hereby granted, free of charge, to any person obtaining a copy
// of this software and associated documentation files (the "Software"), to deal
// in the Software without restriction, including without limitation the rights
// to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
// copies of the Software, and to permit persons to whom the Software is
// furnished to do so, subject to the following conditions:
//
// The above copyright notice and this permission notice shall be included in
// all copies or substantial portions of the Software.
//
// THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
// IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
// FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
// AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
// LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
// OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
// SOFTWARE."""


def _banner(config: GeneratorConfig) -> str:
    return (config.banner or DEFAULT_BANNER).rstrip("\n")


def _wrap_namespace(config: GeneratorConfig, code: List[str]) -> List[str]:
    if not config.namespace:
        return code
    return [f"namespace {config.namespace} {{", "", *code, "", f"}} // namespace {config.namespace}"]


def render_header(body: Sequence[str], config: Optional[GeneratorConfig] = None) -> str:
    """Wrap declaration *body* lines into the full header text."""
    config = config or GeneratorConfig()
    code = [
        f"class {config.class_name} : public {config.base_visitor} {{",
        "public:",
        f"  void accept({config.node_type}* ast);",
        "",
        *body,
        "};",
    ]
    parts = [
        _banner(config),
        "",
        "#pragma once",
        "",
        f"#include <{config.include}>",
        "",
        *_wrap_namespace(config, code),
    ]
    return "\n".join(parts) + "\n"


def render_source(body: Sequence[str], config: Optional[GeneratorConfig] = None) -> str:
    """Wrap definition *body* lines into the full ``.cc`` text."""
    config = config or GeneratorConfig()
    parts = [
        _banner(config),
        "",
        f"#include <{config.header_include}>",
        f"#include <{config.ast_include}>",
        "",
        *_wrap_namespace(config, list(body)),
    ]
    return "\n".join(parts) + "\n"


def write_artifact(text: str, dest: Union[str, Path, TextIO, None] = None) -> None:
    """Write *text* to a path, an open stream, or stdout (``None`` / ``"-"``)."""
    if dest is None or dest == "-":
        sys.stdout.write(text)
        return
    if not isinstance(dest, (str, Path)):
        dest.write(text)
        return

    p = Path(dest).expanduser()
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        raise WriteError(f"cannot write {p}: {e}", span=SourceSpan(file=str(p)), cause=e) from e
    logger.info("Wrote %d bytes to %s", len(text.encode("utf-8")), p)
