from .dashboard import make_dashboard
from .dashboard_export import generate_dashboard
from .panels.growth_panel import make_growth_panel
from .panels.distribution_panel import make_distribution_panel
from .utils.color_schemes import BAND_COLORS, HISTOGRAM_COLOR
