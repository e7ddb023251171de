"""
Output module for the occupancy grid.

Renders the grid as text or as a heat-map image.
"""

import numpy as np


class OccupancyOutput:
    """
    Presentation of a finished occupancy grid.

    Rows are grid rows (y), columns are grid columns (x).
    """

    def __init__(self, grid: np.ndarray):
        self.grid = np.asarray(grid)
        if self.grid.ndim != 2:
            raise ValueError(f"grid must be two-dimensional, got shape {self.grid.shape}")

    def format_grid(self, width: int = 3) -> str:
        """
        Format the grid row by row.

        Every value is right-aligned to width characters and followed by a
        space.
        """
        lines = [
            "".join(f"{int(value):>{width}} " for value in row)
            for row in self.grid
        ]
        return "\n".join(lines)

    def save_png(self, filename: str, colormap: str = "hot") -> str:
        """
        Save the grid as a heat-map PNG.

        Args:
            filename: Output filename (without extension)
            colormap: Matplotlib colormap name

        Returns:
            Path of the written image
        """
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        size_y, size_x = self.grid.shape
        vmax = max(int(self.grid.max()), 1) if self.grid.size else 1

        fig, ax = plt.subplots(figsize=(8, 8))
        im = ax.imshow(
            self.grid,
            origin='lower',
            extent=[0, size_x, 0, size_y],
            cmap=colormap,
            vmin=0,
            vmax=vmax,
            interpolation='nearest'
        )

        plt.colorbar(im, ax=ax, label='Occupancy count')
        ax.set_xlabel('x (cell)')
        ax.set_ylabel('y (cell)')
        ax.set_title('Particle Occupancy')

        path = f"{filename}.png"
        fig.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)
        return path

    def get_grid_statistics(self) -> dict:
        """
        Get statistics about the occupancy grid.

        Returns:
            Dictionary with statistics
        """
        return {
            "total_count": int(np.sum(self.grid)),
            "max_count": int(np.max(self.grid)) if self.grid.size else 0,
            "occupied_cells": int(np.sum(self.grid > 0)),
            "total_cells": int(self.grid.size),
        }
