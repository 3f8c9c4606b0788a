"""Interactive harness; scans one image in IBM Cloud Container Registry.

For this particular harness, you will need to have:

* the ibmcloud CLI with the container-registry plugin installed
* already run `ibmcloud login` and `ibmcloud cr region-set`
* IMAGE set to the image to scan, e.g. us.icr.io/namespace/image:tag
"""

import os

from icr_action.config import Config
from icr_action.factory import Factory

cfg = Config(debug=True)
poller = Factory(cfg).create_scan_poller()
result = poller.run(os.environ["IMAGE"], cfg.policy)

print("\nScan result is in variable 'result'")
print("-----------------------------------\n")
