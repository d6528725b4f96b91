# visualize.py
import os

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def _ensure_dir(outpath):
    out_dir = os.path.dirname(outpath)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)


def plot_steps_distribution(records, outpath):
    _ensure_dir(outpath)
    numbers = [n for n, _ in records]
    steps = [s for _, s in records]
    plt.figure(figsize=(8,4))
    plt.scatter(numbers, steps, s=4)
    plt.title(f"Collatz Steps ({len(records)} samples)")
    plt.xlabel("Number")
    plt.ylabel("Steps to reach 1")
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_hit_miss_rate(hit_rate, outpath):
    _ensure_dir(outpath)
    plt.figure(figsize=(4,4))
    labels = ['Hit', 'Miss']
    sizes = [hit_rate, 1.0 - hit_rate]
    plt.pie(sizes, labels=labels, autopct='%1.1f%%')
    plt.title("Cache Hit/Miss Rate")
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
