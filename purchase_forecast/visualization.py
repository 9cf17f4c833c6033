"""
Visualization Module

Charts for a forecast run:
- Forecast line chart (month label vs quantity sold)
- Training loss curve
"""

import os
from typing import Optional, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns

from .pipeline import ForecastPoint

# Set style
sns.set_style("whitegrid")
plt.rcParams['font.size'] = 10


def plot_forecast(points: Sequence[ForecastPoint],
                  save_path: Optional[str] = None) -> None:
    """
    Plot forecast quantity per month

    Args:
        points: ForecastPoints in month order
        save_path: Path to save plot
    """
    if not points:
        raise ValueError("No forecast points to plot")

    labels = [p.label for p in points]
    quantities = [p.quantity_sold for p in points]

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(labels, quantities, marker='o', linewidth=2, color='#8884d8')

    ax.set_title(f'{points[0].product_description}: Forecast Quantity Sold',
                 fontsize=14, fontweight='bold')
    ax.set_xlabel('Month', fontsize=12)
    ax.set_ylabel('Quantity Sold', fontsize=12)
    ax.grid(True, alpha=0.3, linestyle='--')
    plt.xticks(rotation=45, ha='right')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Plot saved: {save_path}")

    plt.close(fig)


def plot_training_loss(history: Sequence[float],
                       save_path: Optional[str] = None) -> None:
    """
    Plot per-epoch training loss

    Args:
        history: Mean loss per epoch
        save_path: Path to save plot
    """
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(range(1, len(history) + 1), history, linewidth=2)

    ax.set_title('Training Loss (MSE, normalized quantity)', fontsize=14, fontweight='bold')
    ax.set_xlabel('Epoch', fontsize=12)
    ax.set_ylabel('Loss', fontsize=12)
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Plot saved: {save_path}")

    plt.close(fig)


def create_all_visualizations(points: Sequence[ForecastPoint],
                              history: Sequence[float],
                              output_dir: str = 'outputs/plots') -> None:
    """
    Create all visualizations for a run

    Args:
        points: Forecast points
        history: Training loss history
        output_dir: Output directory for plots
    """
    os.makedirs(output_dir, exist_ok=True)

    print("\n" + "="*60)
    print("CREATING VISUALIZATIONS")
    print("="*60)

    plot_forecast(points, save_path=f'{output_dir}/forecast.png')
    plot_training_loss(history, save_path=f'{output_dir}/training_loss.png')

    print("\n✓ All visualizations created")
