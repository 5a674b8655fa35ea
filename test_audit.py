"""
Quick smoke test, run with: python test_audit.py
Fetches a handful of live pages, scores them and prints the category breakdown.
"""

import asyncio
import json
import sys

from auditor.batch import bulk_scan
from auditor.core import analyze_page

URLS = [
    "https://blog.rei.com/camp/how-to-introduce-your-indoorsy-friend-to-the-outdoors/",
    "https://www.python.org/about/",
    "https://example.com/",
]

KEYWORDS = {
    "https://blog.rei.com/camp/how-to-introduce-your-indoorsy-friend-to-the-outdoors/": "camping",
    "https://www.python.org/about/": "python",
}


def print_result(result):
    if not result.ok:
        print(f"  FAILED ({result.status_code or 'network'}): {result.error}")
        print("-" * 80)
        return
    scored = result.scored
    print(f"  overall {scored.overall} ({scored.grade}), {scored.issue_count} issues, {scored.high_issues} high")
    for name, category in scored.categories.items():
        print(f"    {name:<12} {category.score:>3}  (weight {category.weight})")
    for issue in scored.issues[:8]:
        print(f"    [{issue.severity}] {issue.message}")
    print("-" * 80)


async def main(urls):
    for url in urls:
        print(f"\n>>> Auditing: {url}\n")
        result = await analyze_page(url, keywords=KEYWORDS.get(url))
        print_result(result)

    outcome = await bulk_scan(urls)
    print("\nBulk summary:")
    print(json.dumps(outcome["summary"], indent=2))


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or URLS))
