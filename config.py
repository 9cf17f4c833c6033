"""
Configuration File for Purchase Forecasting

Central place to configure all parameters for the forecasting system.
Modify values here to experiment with different settings.
"""

# ==============================================================================
# DATA LOADING / GENERATION
# ==============================================================================
DATA_CONFIG = {
    'generate_new_data': True,  # Set False to use existing data
    'data_path': 'data/sales_history.csv',  # Path if using existing data
    'start_date': '2021-01-01',
    'n_months': 36,  # 3 years of monthly history
    'products': ['Widget', 'Gadget', 'Gizmo'],
    'malformed_fraction': 0.02,  # Share of deliberately broken rows in synthetic data
    'seed': 42
}

# ==============================================================================
# NEURAL NETWORK CONFIGURATION
# ==============================================================================
MODEL_CONFIG = {
    'hidden_units': 10,      # One hidden ReLU layer
    'epochs': 100,           # Fixed number of passes, no early stopping
    'learning_rate': 0.001,  # Adam step size
    'batch_size': 32,
    'shuffle': True,         # Reshuffle training rows every pass
    'seed': 42,              # Weight init + shuffling
    'log_every': 10          # Print loss every N epochs (verbose runs)
}

# ==============================================================================
# FORECAST CONFIGURATION
# ==============================================================================
FORECAST_CONFIG = {
    'forecast_horizon': 6,      # Number of months to forecast
    'selected_product': None,   # None = first product in catalog
    'start_year_month': None    # 'YYYY-MM'; None = earliest month of product
}

# ==============================================================================
# OUTPUT CONFIGURATION
# ==============================================================================
OUTPUT_CONFIG = {
    'output_dir': 'outputs',
    'data_dir': 'data'
}
