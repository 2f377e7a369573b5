#!/usr/bin/env python3
"""
Blog Generator command-line client

Usage:
    python scripts/generate_blog.py "The Future of Artificial Intelligence"
    python scripts/generate_blog.py --base-url http://localhost:5000 --output post.md "Remote work"

Sends the topic to a running Blog Generator service and prints the generated markdown
(or writes it to --output). Errors are printed to stderr with the server's request id.
"""

import argparse
import sys
from pathlib import Path

# Allow running from the repository root without installing the project
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from client.blog_api import BlogApiClient, BlogApiError  # noqa: E402


def generate(base_url: str, prompt: str, output: str = None, timeout_s: float = 130.0) -> int:
    """
    Generate one blog post and emit it.

    Returns:
        int: Process exit code (0 on success, 1 on any API error).
    """
    client = BlogApiClient(base_url=base_url, timeout_s=timeout_s)
    try:
        result = client.generate_blog(prompt)
    except BlogApiError as exc:
        details = f" [code={exc.code}]" if exc.code else ""
        if exc.request_id:
            details += f" [requestId={exc.request_id}]"
        print(f"Error: {exc.message}{details}", file=sys.stderr)
        return 1

    if output:
        Path(output).write_text(result.blog, encoding="utf-8")
        print(f"Wrote {result.meta.word_count} words ({result.meta.model}) to {output}")
    else:
        print(result.blog)
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Generate a blog post with the Blog Generator API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_blog.py "The Future of Artificial Intelligence"
  python scripts/generate_blog.py --output post.md "Remote work"
        """
    )
    parser.add_argument('prompt', help='Blog topic (3-500 characters)')
    parser.add_argument('--base-url', default='http://localhost:5000', help='Service base URL')
    parser.add_argument('--output', help='Write the markdown to this file instead of stdout')
    parser.add_argument('--timeout', type=float, default=130.0, help='Request timeout in seconds')

    args = parser.parse_args()
    sys.exit(generate(args.base_url, args.prompt, args.output, args.timeout))


if __name__ == '__main__':
    main()
