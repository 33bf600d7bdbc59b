#!/usr/bin/env python3

import argparse
import os
import time

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from HeatGen.types.heat_model import HeatMapConfig, HeatModel
from HeatGen.types.points import PointSet
from HeatGen.decoder.color_mapper import ColorMapperConfig
from HeatGen.io.tile_image import save_tile_png
from HeatGen.utils.projection import WebMercatorProjection
from HeatGen.visualizer.tile_visualizer import TileMosaicConfig, TileMosaicVisualizer


# =========================
# Argument Parser
# =========================
def parse_args():
    parser = argparse.ArgumentParser(
        description="Render heat map tile mosaics for a synthetic point set"
    )

    parser.add_argument("--output_dir", type=str, default="./output",
                        help="Directory to save outputs")

    parser.add_argument("--n_points", type=int, default=5000,
                        help="Number of synthetic points")

    parser.add_argument("--n_clusters", type=int, default=6,
                        help="Number of point clusters")

    parser.add_argument("--zoom_scales", type=float, nargs="+",
                        default=[1 / 4096, 1 / 2048, 1 / 1024],
                        help="Zoom scales to render (screen pixels per plane unit)")

    parser.add_argument("--scheme", type=str, default="ramp", choices=["ramp", "jet"],
                        help="Colour scheme")

    parser.add_argument("--seed", type=int, default=0)

    return parser.parse_args()


# =========================
# Synthetic data
# =========================
def synthetic_points(n_points, n_clusters, seed=0):
    """
    Clusters scattered around central Europe, projected to Web-Mercator.
    """
    rng = np.random.default_rng(seed)
    projection = WebMercatorProjection()

    centers = np.column_stack([
        rng.uniform(45.0, 53.0, n_clusters),
        rng.uniform(2.0, 20.0, n_clusters),
    ])
    labels = rng.integers(0, n_clusters, n_points)
    spread = rng.uniform(0.05, 0.6, n_clusters)

    lat = centers[labels, 0] + rng.normal(0, 1, n_points) * spread[labels]
    lon = centers[labels, 1] + rng.normal(0, 1, n_points) * spread[labels]

    positions = np.array([projection.from_geographic(a, o) for a, o in zip(lat, lon)])
    return PointSet.from_arrays(positions), projection


# =========================
# Main
# =========================
def main():
    args = parse_args()

    os.makedirs(args.output_dir, exist_ok=True)

    points, projection = synthetic_points(args.n_points, args.n_clusters, args.seed)

    config = HeatMapConfig(verbose=True)
    config.renderer.colors = ColorMapperConfig(scheme=args.scheme)

    model = HeatModel(points, config=config, projection=projection)

    lat, lon = model.center_coordinate()
    print(f"Center: lat={lat:.4f}, lon={lon:.4f}")

    visualizer = TileMosaicVisualizer(TileMosaicConfig())
    rows = []

    for zoom_scale in args.zoom_scales:
        print(f"Rendering zoom scale {zoom_scale:g}...")

        t0 = time.perf_counter()
        mosaic = visualizer.mosaic(model, model.bounding_region(), zoom_scale)
        elapsed = time.perf_counter() - t0

        name = f"mosaic_{zoom_scale:.3e}.png"
        save_tile_png(mosaic, os.path.join(args.output_dir, name))

        fig = visualizer.visualize(model, model.bounding_region(), zoom_scale)
        fig.savefig(os.path.join(args.output_dir, f"preview_{zoom_scale:.3e}.png"), dpi=150)
        plt.close(fig)

        rows.append({
            "zoom_scale": zoom_scale,
            "scale_factor": model.scale_factor(zoom_scale),
            "painted_pixels": int((mosaic[..., 3] > 0).sum()),
            "seconds": elapsed,
            "image": name,
        })

    df = pd.DataFrame(rows)
    df.to_csv(os.path.join(args.output_dir, "summary.csv"), index=False)

    print("\n===== Summary =====")
    print(df.to_string(index=False))


if __name__ == "__main__":
    main()
