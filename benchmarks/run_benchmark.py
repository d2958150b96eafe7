"""Time the display chain over generated clips, cold then warm cache.

Usage:
    python benchmarks/run_benchmark.py [clip_count]

Requires mark-clipper to be installed: pip install -e ".[dev]"
"""

import sys
import time

from mark_clipper.core.models import Clip
from mark_clipper.core.strategy import ContentStrategy


def make_clips(count: int) -> list[Clip]:
    clips = []
    for i in range(count):
        body = "".join(
            f"<h{(j % 6) + 1}>Section {j}</h{(j % 6) + 1}>"
            f"<p onclick='x()'>Paragraph {j} of clip {i} with <b>bold</b> text.</p>"
            for j in range(20)
        )
        clips.append(Clip(
            id=i,
            title=f"Clip {i}",
            html_raw=f"<div><script>track({i})</script>{body}</div>",
            text_plain=f"Clip {i} body",
        ))
    return clips


def main() -> None:
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 50
    clips = make_clips(count)
    strategy = ContentStrategy()
    print(f"Rendering {count} clips...")

    start = time.time()
    strategy.batch_get_display_content(clips)
    cold = time.time() - start

    start = time.time()
    strategy.batch_get_display_content(clips)
    warm = time.time() - start

    stats = strategy.cache.stats()
    print(f"\nCold: {cold * 1000:.1f}ms  ({cold * 1000 / count:.2f}ms/clip)")
    print(f"Warm: {warm * 1000:.1f}ms  ({warm * 1000 / count:.2f}ms/clip)")
    print(f"Cache: size={stats.size}/{stats.max_size} hits={stats.hits} "
          f"misses={stats.misses} hit_rate={stats.hit_rate}")


if __name__ == "__main__":
    main()
