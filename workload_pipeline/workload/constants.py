"""Workload constants shared across the mutation passes."""

# Label key used for generated selectors, workload labels and pod labels
SELECTOR_LABEL = "workload.user.cattle.io/workloadselector"

# Annotation holding the JSON-encoded scheduling state
STATE_ANNOTATION = "workload.cattle.io/state"

# Concrete kinds served through the aggregate workload API
WORKLOAD_KINDS = (
    "deployment",
    "replicaSet",
    "replicationController",
    "daemonSet",
    "statefulSet",
    "job",
    "cronJob",
)

# Kinds that get no selector and default to restartPolicy=OnFailure
JOB_KINDS = {"job", "cronjob"}

# Port names feed length-limited service names, so the kind is a single digit
PORT_KIND_CODES = {
    "NodePort": 1,
    "ClusterIP": 2,
    "LoadBalancer": 3,
}

MAX_PORT_NAME_LENGTH = 15

DEFAULT_REGISTRY_DOMAIN = "docker.io"
# Credentials for the default registry are registered under this domain
DEFAULT_REGISTRY_CREDENTIAL_DOMAIN = "index.docker.io"
