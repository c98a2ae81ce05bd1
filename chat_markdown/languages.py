"""Registry of code block languages recognized in fence headers."""

from __future__ import annotations

from collections.abc import Iterable

# Lower-case fence name -> display name
LANGUAGE_NAMES: dict[str, str] = {
    "1c": "1C",
    "abap": "ABAP",
    "ada": "Ada",
    "applescript": "AppleScript",
    "arduino": "Arduino",
    "asm": "Assembly",
    "assembly": "Assembly",
    "awk": "AWK",
    "bash": "Bash",
    "bat": "Batch",
    "batch": "Batch",
    "c": "C",
    "c#": "C#",
    "c++": "C++",
    "clojure": "Clojure",
    "cmake": "CMake",
    "cobol": "COBOL",
    "coffeescript": "CoffeeScript",
    "cpp": "C++",
    "crystal": "Crystal",
    "cs": "C#",
    "csharp": "C#",
    "css": "CSS",
    "csv": "CSV",
    "d": "D",
    "dart": "Dart",
    "diff": "Diff",
    "dockerfile": "Dockerfile",
    "elixir": "Elixir",
    "elm": "Elm",
    "erlang": "Erlang",
    "f#": "F#",
    "fortran": "Fortran",
    "fsharp": "F#",
    "gdscript": "GDScript",
    "glsl": "GLSL",
    "go": "Go",
    "golang": "Go",
    "gradle": "Gradle",
    "graphql": "GraphQL",
    "groovy": "Groovy",
    "haskell": "Haskell",
    "hcl": "HCL",
    "hlsl": "HLSL",
    "html": "HTML",
    "http": "HTTP",
    "ini": "INI",
    "java": "Java",
    "javascript": "JavaScript",
    "js": "JavaScript",
    "json": "JSON",
    "jsx": "JSX",
    "julia": "Julia",
    "kotlin": "Kotlin",
    "kt": "Kotlin",
    "latex": "LaTeX",
    "less": "Less",
    "lisp": "Lisp",
    "lua": "Lua",
    "makefile": "Makefile",
    "markdown": "Markdown",
    "matlab": "MATLAB",
    "md": "Markdown",
    "nginx": "Nginx",
    "nim": "Nim",
    "nix": "Nix",
    "objc": "Objective-C",
    "objectivec": "Objective-C",
    "ocaml": "OCaml",
    "pascal": "Pascal",
    "perl": "Perl",
    "php": "PHP",
    "plaintext": "Plain Text",
    "powershell": "PowerShell",
    "prolog": "Prolog",
    "protobuf": "Protocol Buffers",
    "ps1": "PowerShell",
    "py": "Python",
    "python": "Python",
    "r": "R",
    "rb": "Ruby",
    "ruby": "Ruby",
    "rs": "Rust",
    "rust": "Rust",
    "sass": "Sass",
    "scala": "Scala",
    "scheme": "Scheme",
    "scss": "SCSS",
    "sh": "Shell",
    "shell": "Shell",
    "solidity": "Solidity",
    "sql": "SQL",
    "swift": "Swift",
    "tex": "TeX",
    "toml": "TOML",
    "ts": "TypeScript",
    "tsx": "TSX",
    "typescript": "TypeScript",
    "vb": "Visual Basic",
    "vbnet": "VB.NET",
    "verilog": "Verilog",
    "vhdl": "VHDL",
    "vue": "Vue",
    "wasm": "WebAssembly",
    "xml": "XML",
    "yaml": "YAML",
    "yml": "YAML",
    "zig": "Zig",
}


def get_language_name(name: str, extra: Iterable[str] = ()) -> str | None:
    """Look up the display name of a fence language.

    Args:
        name: Lower-cased, stripped first line of a fenced code block.
        extra: Additional lower-case names accepted on top of the registry.
            They are displayed as written.

    Returns:
        str | None: Display name, or None when the language is unknown.

    Examples:
        get_language_name("py")  # "Python"
        get_language_name("notalang")  # None
        get_language_name("jinja", extra=["jinja"])  # "jinja"
    """
    if not name:
        return None
    pretty = LANGUAGE_NAMES.get(name)
    if pretty is not None:
        return pretty
    if name in extra:
        return name
    return None
