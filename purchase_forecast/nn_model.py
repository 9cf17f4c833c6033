"""
Neural Network Model Module

Small feed-forward regressor mapping [month_sin, month_cos, product_code] to
normalized quantity sold:
- 3 inputs -> 10 ReLU units -> 1 linear output
- Mean squared error, Adam optimizer
- Fixed number of passes over the training set (no early stopping)

Weight initialization and shuffling use a private torch.Generator seeded
from the constructor, so two models built with the same seed and trained
on the same rows end up identical.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
import torch
import torch.nn as nn
import torch.optim as optim
from torch.utils.data import DataLoader, TensorDataset

from config import MODEL_CONFIG
from .errors import EmptyTrainingSet
from .feature_engineering import FEATURE_COLUMNS, TARGET_COLUMN


EpochObserver = Callable[[int, float], None]


class MonthlySalesNet(nn.Module):
    """One hidden layer regressor"""

    def __init__(self, n_features: int = 3, hidden_units: int = 10):
        super(MonthlySalesNet, self).__init__()

        self.network = nn.Sequential(
            nn.Linear(n_features, hidden_units),
            nn.ReLU(),
            nn.Linear(hidden_units, 1)
        )

    def reset_parameters(self, generator: torch.Generator) -> None:
        """Glorot-uniform weights, zero biases"""
        for layer in self.network:
            if isinstance(layer, nn.Linear):
                nn.init.xavier_uniform_(layer.weight, generator=generator)
                nn.init.zeros_(layer.bias)

    def forward(self, x):
        return self.network(x).squeeze(-1)


class ForecastModel:
    """Trainable regressor from feature vectors to normalized quantity"""

    def __init__(self,
                 hidden_units: int = MODEL_CONFIG['hidden_units'],
                 epochs: int = MODEL_CONFIG['epochs'],
                 learning_rate: float = MODEL_CONFIG['learning_rate'],
                 batch_size: int = MODEL_CONFIG['batch_size'],
                 shuffle: bool = MODEL_CONFIG['shuffle'],
                 seed: int = MODEL_CONFIG['seed']):
        """
        Initialize model

        Args:
            hidden_units: Width of the hidden ReLU layer
            epochs: Passes over the full training set
            learning_rate: Adam learning rate
            batch_size: Rows per optimizer step
            shuffle: Reshuffle rows each pass
            seed: Seed for weight init and shuffling
        """
        if epochs < 1:
            raise ValueError(f"epochs must be positive, got {epochs}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.hidden_units = hidden_units
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.batch_size = batch_size
        self.shuffle = shuffle
        self.seed = seed

        self.network: Optional[MonthlySalesNet] = None
        self.history: List[float] = []

    @property
    def is_fitted(self) -> bool:
        return self.network is not None

    @staticmethod
    def _to_tensor(features: Union[pd.DataFrame, np.ndarray, Sequence]) -> torch.Tensor:
        if isinstance(features, pd.DataFrame):
            features = features[FEATURE_COLUMNS].to_numpy(dtype=np.float32)
        arr = np.asarray(features, dtype=np.float32)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        return torch.from_numpy(arr)

    def fit(self,
            train_df: pd.DataFrame,
            on_epoch_end: Optional[EpochObserver] = None) -> 'ForecastModel':
        """
        Train on every row for the configured number of epochs

        Args:
            train_df: DataFrame with FEATURE_COLUMNS and target
            on_epoch_end: Optional observer called with (epoch, mean loss)
                after each pass

        Returns:
            self

        Raises:
            EmptyTrainingSet: if train_df has no rows
        """
        if len(train_df) == 0:
            raise EmptyTrainingSet()

        X = self._to_tensor(train_df)
        y = torch.from_numpy(train_df[TARGET_COLUMN].to_numpy(dtype=np.float32))
        n_rows = X.shape[0]

        generator = torch.Generator().manual_seed(self.seed)
        network = MonthlySalesNet(n_features=X.shape[1], hidden_units=self.hidden_units)
        network.reset_parameters(generator)

        train_loader = DataLoader(TensorDataset(X, y), batch_size=self.batch_size,
                                  shuffle=self.shuffle, generator=generator, num_workers=0)

        criterion = nn.MSELoss()
        optimizer = optim.Adam(network.parameters(), lr=self.learning_rate)
        history = []

        for epoch in range(self.epochs):
            network.train()

            epoch_loss = 0.0
            for X_batch, y_batch in train_loader:
                optimizer.zero_grad()
                loss = criterion(network(X_batch), y_batch)
                loss.backward()
                optimizer.step()

                epoch_loss += loss.item() * len(X_batch)

            epoch_loss /= n_rows
            history.append(epoch_loss)

            if on_epoch_end is not None:
                on_epoch_end(epoch, epoch_loss)

        network.eval()
        self.network = network
        self.history = history

        return self

    async def fit_async(self,
                        train_df: pd.DataFrame,
                        on_epoch_end: Optional[EpochObserver] = None) -> 'ForecastModel':
        """Run fit() in a worker thread"""
        return await asyncio.to_thread(self.fit, train_df, on_epoch_end)

    def predict(self, features: Union[pd.DataFrame, np.ndarray, Sequence]) -> np.ndarray:
        """
        Predict normalized quantity for each feature row

        Args:
            features: DataFrame with FEATURE_COLUMNS, or an (n, 3) array

        Returns:
            Array of normalized predictions (not clipped to [0, 1])
        """
        if self.network is None:
            raise ValueError("No trained model found. Call fit() first.")

        with torch.no_grad():
            predictions = self.network(self._to_tensor(features))

        return predictions.numpy().astype(float)

    def predict_one(self, feature_vector: Sequence[float]) -> float:
        return float(self.predict(feature_vector)[0])

    def get_params(self) -> Dict:
        return {
            'hidden_units': self.hidden_units,
            'epochs': self.epochs,
            'learning_rate': self.learning_rate,
            'batch_size': self.batch_size,
            'shuffle': self.shuffle,
            'seed': self.seed
        }
