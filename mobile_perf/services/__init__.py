"""External services such as the Sauce Labs device cloud."""

from .saucelabs import SauceLabsCredentials, SauceLabsUploader
