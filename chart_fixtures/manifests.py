"""Raw manifest text used by chart templates and release hooks.

These strings are test data and are kept verbatim. MANIFEST_WITH_TEST_HOOK
in particular is not well-formed YAML (tab indentation, trailing comma);
consumers that parse hook manifests are expected to cope with it.
"""

from __future__ import annotations

MANIFEST_WITH_HOOK = """kind: ConfigMap
metadata:
  name: test-cm
  annotations:
    "helm.sh/hook": post-install,pre-delete,post-upgrade
data:
  name: value"""

MANIFEST_WITH_TEST_HOOK = """kind: Pod
  metadata:
	name: finding-nemo,
	annotations:
	  "helm.sh/hook": test
  spec:
	containers:
	- name: nemo-test
	  image: fake-image
	  cmd: fake-command
  """

# Two documents separated by "---"
RBAC_MANIFESTS = """apiVersion: rbac.authorization.k8s.io/v1
kind: Role
metadata:
  name: schedule-agents
rules:
- apiGroups: [""]
  resources: ["pods", "pods/exec", "pods/log"]
  verbs: ["*"]

---

apiVersion: rbac.authorization.k8s.io/v1
kind: RoleBinding
metadata:
  name: schedule-agents
  namespace: {{ default .Release.Namespace}}
roleRef:
  apiGroup: rbac.authorization.k8s.io
  kind: Role
  name: schedule-agents
subjects:
- kind: ServiceAccount
  name: schedule-agents
  namespace: {{ .Release.Namespace }}
"""
