"""Built-in sample snippets used to seed an empty or unreadable store."""

from .models import Snippet

_SAMPLES = [
    (
        "React useState Hook",
        "javascript",
        ["react", "hooks", "state"],
        "import { useState } from 'react';\n"
        "\n"
        "function Example() {\n"
        "  const [count, setCount] = useState(0);\n"
        "  \n"
        "  return (\n"
        "    <div>\n"
        "      <p>You clicked {count} times</p>\n"
        "      <button onClick={() => setCount(count + 1)}>\n"
        "        Click me\n"
        "      </button>\n"
        "    </div>\n"
        "  );\n"
        "}",
    ),
    (
        "Python List Comprehension",
        "python",
        ["python", "list", "comprehension"],
        "# Basic list comprehension\n"
        "squares = [x**2 for x in range(10)]\n"
        "\n"
        "# With condition\n"
        "even_squares = [x**2 for x in range(10) if x % 2 == 0]\n"
        "\n"
        "# Nested comprehension\n"
        "matrix = [[i+j for j in range(3)] for i in range(3)]",
    ),
    (
        "CSS Flexbox Center",
        "css",
        ["css", "flexbox", "layout"],
        ".container {\n"
        "  display: flex;\n"
        "  justify-content: center;\n"
        "  align-items: center;\n"
        "  min-height: 100vh;\n"
        "}\n"
        "\n"
        ".item {\n"
        "  /* Your content here */\n"
        "}",
    ),
    (
        "PowerShell Get-Process",
        "powershell",
        ["PS", "powershell", "process"],
        "# Get all running processes\n"
        "Get-Process | Where-Object {$_.CPU -gt 10} | Sort-Object CPU -Descending\n"
        "\n"
        "# Get specific process by name\n"
        "Get-Process -Name 'notepad' -ErrorAction SilentlyContinue\n"
        "\n"
        "# Get process with custom properties\n"
        "Get-Process | Select-Object Name, Id, CPU, WorkingSet | Format-Table -AutoSize",
    ),
    (
        "Java Stream API Example",
        "java",
        ["java", "stream", "collections"],
        "import java.util.List;\n"
        "import java.util.stream.Collectors;\n"
        "\n"
        "// Filter and map using streams\n"
        'List<String> names = List.of("Alice", "Bob", "Charlie", "David");\n'
        "List<String> filteredNames = names.stream()\n"
        "    .filter(name -> name.length() > 4)\n"
        "    .map(String::toUpperCase)\n"
        "    .collect(Collectors.toList());\n"
        "\n"
        "System.out.println(filteredNames); // [ALICE, CHARLIE, DAVID]",
    ),
]


def sample_snippets_create() -> list[Snippet]:
    """Return a fresh copy of the sample collection, each with a new id."""
    return [
        Snippet(title=title, language=language, tags=list(tags), code=code)
        for title, language, tags, code in _SAMPLES
    ]
