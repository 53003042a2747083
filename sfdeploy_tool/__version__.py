"""Version information for sfdeploy-tool package"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__author__ = "sfdeploy-tool contributors"
__email__ = "sfdeploy-tool@users.noreply.github.com"
__license__ = "MIT"
