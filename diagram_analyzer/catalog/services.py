"""
Built-in Azure service definitions.

Each entry lists every name variant a diagram author is likely to use for
the service. Generic nouns ("database", "network", "file storage") may appear
as keywords, where the context validator demands corroboration, but never as
aliases or common names, which are accepted without it.
"""

from typing import Tuple

from .models import (
    ConfidenceWeights,
    PropertyHints,
    ServiceDefinition,
    ServiceDependencies,
    compile_patterns,
)

AZURE_SERVICES: Tuple[ServiceDefinition, ...] = (
    # Compute
    ServiceDefinition(
        id="virtual-machines",
        display_name="Virtual Machines",
        category="Compute",
        resource_type="Microsoft.Compute/virtualMachines",
        keywords=(
            "virtual machine",
            "vm",
            "virtual machines",
            "compute",
            "server",
            "instance",
        ),
        aliases=("vm", "vms", "azure vm", "virtual machine", "compute instance"),
        common_names=(
            "VM",
            "Virtual Machine",
            "Azure VM",
            "Compute VM",
            "Windows VM",
            "Linux VM",
        ),
        abbreviations=("vm", "vms", "avm"),
        icon_patterns=("vm", "virtual-machine", "computer", "server"),
        text_patterns=compile_patterns(
            r"\bvm\b",
            r"virtual\s*machine",
            r"compute\s*instance",
            r"azure\s*vm",
            r"windows\s*vm",
            r"linux\s*vm",
        ),
        properties=PropertyHints(
            tier=("Basic", "Standard", "Premium"),
            sku=("A1", "D2s_v3", "B1s", "F2s_v2"),
            pricing=("Pay-as-you-go", "Reserved"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=(
                "virtual-network",
                "storage-account",
                "network-security-group",
            ),
            required_with=("virtual-network",),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    ServiceDefinition(
        id="app-service",
        display_name="App Service",
        category="Compute",
        resource_type="Microsoft.Web/sites",
        alternative_resource_types=("Microsoft.Web/serverfarms",),
        keywords=(
            "app service",
            "web app",
            "webapp",
            "web application",
            "api app",
            "mobile app",
        ),
        aliases=("web app", "webapp", "app service", "azure web app"),
        common_names=("App Service", "Web App", "API App", "Mobile App"),
        abbreviations=("as", "wa", "webapp"),
        icon_patterns=("web-app", "app-service", "globe", "web"),
        text_patterns=compile_patterns(
            r"app\s*service",
            r"web\s*app",
            r"web\s*application",
            r"api\s*app",
            r"mobile\s*app",
            r"webapp",
        ),
        properties=PropertyHints(
            tier=("Free", "Shared", "Basic", "Standard", "Premium", "Isolated"),
            sku=("F1", "D1", "B1", "S1", "P1v2", "I1"),
            pricing=("Consumption", "App Service Plan"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("sql-database", "storage-account", "application-insights"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    ServiceDefinition(
        id="azure-functions",
        display_name="Azure Functions",
        category="Compute",
        resource_type="Microsoft.Web/sites/functions",
        keywords=("azure functions", "function app", "functions", "serverless", "faas"),
        aliases=("functions", "function app", "azure functions", "serverless functions"),
        common_names=(
            "Azure Functions",
            "Function App",
            "Functions",
            "Serverless Functions",
        ),
        abbreviations=("af", "func", "functions"),
        icon_patterns=("function", "lambda", "code", "serverless"),
        text_patterns=compile_patterns(
            r"azure\s*functions",
            r"function\s*app",
            r"\bfunctions\b",
            r"serverless",
            r"faas",
        ),
        properties=PropertyHints(
            tier=("Consumption", "Premium", "Dedicated"),
            pricing=("Pay-per-execution", "Premium Plan"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("storage-account", "application-insights", "key-vault"),
            required_with=("storage-account",),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Databases
    ServiceDefinition(
        id="sql-database",
        display_name="SQL Database",
        category="Database",
        resource_type="Microsoft.Sql/servers/databases",
        alternative_resource_types=("Microsoft.Sql/servers", "Microsoft.Sql/databases"),
        keywords=(
            "sql database",
            "azure sql",
            "sql db",
            "database",
            "relational database",
            "mssql",
        ),
        aliases=("sql db", "azure sql", "sql database", "azure sql database"),
        common_names=("SQL Database", "Azure SQL", "SQL DB", "Azure SQL Database"),
        abbreviations=("sqldb", "sql", "db"),
        icon_patterns=("database", "sql", "data"),
        text_patterns=compile_patterns(
            r"sql\s*database",
            r"azure\s*sql",
            r"sql\s*db",
            r"\bsqldb\b",
            r"mssql",
            r"relational\s*database",
        ),
        properties=PropertyHints(
            tier=("Basic", "Standard", "Premium", "General Purpose", "Business Critical"),
            sku=("Basic", "S0", "S1", "P1", "GP_Gen5_2"),
            pricing=("DTU", "vCore"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("app-service", "virtual-machines", "key-vault"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    ServiceDefinition(
        id="cosmos-db",
        display_name="Cosmos DB",
        category="Database",
        resource_type="Microsoft.DocumentDB/databaseAccounts",
        alternative_resource_types=("Microsoft.DocumentDB/accounts",),
        keywords=(
            "cosmos db",
            "cosmosdb",
            "document db",
            "nosql",
            "mongodb",
            "cassandra",
            "graph db",
        ),
        aliases=("cosmos", "cosmosdb", "document db", "azure cosmos"),
        common_names=("Cosmos DB", "Azure Cosmos DB", "DocumentDB", "NoSQL Database"),
        abbreviations=("cosmos", "cdb", "docdb"),
        icon_patterns=("cosmos", "database", "document", "nosql"),
        text_patterns=compile_patterns(
            r"cosmos\s*db",
            r"cosmosdb",
            r"document\s*db",
            r"azure\s*cosmos",
            r"nosql",
            r"mongodb\s*api",
        ),
        properties=PropertyHints(
            tier=("Serverless", "Provisioned"),
            sku=("Standard",),
            pricing=("Request Units", "Serverless"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("app-service", "azure-functions", "application-insights"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Storage
    ServiceDefinition(
        id="storage-account",
        display_name="Storage Account",
        category="Storage",
        resource_type="Microsoft.Storage/storageAccounts",
        keywords=(
            "storage account",
            "blob storage",
            "file storage",
            "queue storage",
            "table storage",
            "azure storage",
        ),
        aliases=("storage", "blob", "azure storage", "storage account"),
        common_names=("Storage Account", "Blob Storage", "Azure Storage"),
        abbreviations=("sa", "storage", "blob"),
        icon_patterns=("storage", "blob", "file", "data"),
        text_patterns=compile_patterns(
            r"storage\s*account",
            r"blob\s*storage",
            r"azure\s*storage",
            r"file\s*storage",
            r"queue\s*storage",
            r"table\s*storage",
        ),
        properties=PropertyHints(
            tier=("Standard", "Premium"),
            sku=("Standard_LRS", "Standard_GRS", "Premium_LRS"),
            pricing=("Hot", "Cool", "Archive"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("app-service", "virtual-machines", "azure-functions"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Networking
    ServiceDefinition(
        id="virtual-network",
        display_name="Virtual Network",
        category="Networking",
        resource_type="Microsoft.Network/virtualNetworks",
        keywords=("virtual network", "vnet", "network", "subnet", "vpc"),
        aliases=("vnet", "virtual network", "azure vnet"),
        common_names=("Virtual Network", "VNet", "Azure VNet"),
        abbreviations=("vnet", "vn", "net"),
        icon_patterns=("network", "vnet", "cloud-network"),
        text_patterns=compile_patterns(
            r"virtual\s*network",
            r"\bvnet\b",
            r"azure\s*vnet",
            r"\bvpc\b",
            r"subnet",
        ),
        properties=PropertyHints(
            tier=("Standard",),
            pricing=("Free", "Gateway charges apply"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("virtual-machines", "app-service", "load-balancer"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    ServiceDefinition(
        id="load-balancer",
        display_name="Load Balancer",
        category="Networking",
        resource_type="Microsoft.Network/loadBalancers",
        keywords=(
            "load balancer",
            "lb",
            "application gateway",
            "traffic manager",
            "front door",
        ),
        aliases=("lb", "load balancer", "alb", "application gateway"),
        common_names=(
            "Load Balancer",
            "Application Gateway",
            "Traffic Manager",
            "Front Door",
        ),
        abbreviations=("lb", "alb", "ag", "tm"),
        icon_patterns=("load-balancer", "gateway", "traffic"),
        text_patterns=compile_patterns(
            r"load\s*balancer",
            r"\blb\b",
            r"application\s*gateway",
            r"traffic\s*manager",
            r"front\s*door",
        ),
        properties=PropertyHints(
            tier=("Basic", "Standard"),
            sku=("Basic", "Standard", "WAF_v2"),
            pricing=("Fixed", "Consumption"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("virtual-machines", "app-service", "virtual-network"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Security
    ServiceDefinition(
        id="key-vault",
        display_name="Key Vault",
        category="Security",
        resource_type="Microsoft.KeyVault/vaults",
        keywords=("key vault", "keyvault", "secrets", "keys", "certificates", "hsm"),
        aliases=("key vault", "keyvault", "vault", "azure key vault"),
        common_names=("Key Vault", "Azure Key Vault", "Vault", "Secrets Vault"),
        abbreviations=("kv", "vault", "akv"),
        icon_patterns=("key", "vault", "security", "lock"),
        text_patterns=compile_patterns(
            r"key\s*vault",
            r"keyvault",
            r"azure\s*vault",
            r"secrets\s*vault",
            r"\bhsm\b",
        ),
        properties=PropertyHints(
            tier=("Standard", "Premium"),
            pricing=("Standard", "Premium HSM"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("app-service", "azure-functions", "virtual-machines"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Monitoring
    ServiceDefinition(
        id="application-insights",
        display_name="Application Insights",
        category="Monitoring",
        resource_type="Microsoft.Insights/components",
        keywords=(
            "application insights",
            "app insights",
            "monitoring",
            "telemetry",
            "apm",
        ),
        aliases=("app insights", "application insights", "insights"),
        common_names=("Application Insights", "App Insights", "Insights", "APM"),
        abbreviations=("ai", "appinsights", "insights"),
        icon_patterns=("insights", "monitoring", "analytics", "chart"),
        text_patterns=compile_patterns(
            r"application\s*insights",
            r"app\s*insights",
            r"\binsights\b",
            r"telemetry",
            r"\bapm\b",
        ),
        properties=PropertyHints(
            tier=("Standard",),
            pricing=("Pay-as-you-go", "Commitment Tiers"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("app-service", "azure-functions", "virtual-machines"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    # Containers
    ServiceDefinition(
        id="container-registry",
        display_name="Container Registry",
        category="Containers",
        resource_type="Microsoft.ContainerRegistry/registries",
        keywords=("container registry", "acr", "docker registry", "container images"),
        aliases=("acr", "container registry", "docker registry"),
        common_names=("Container Registry", "ACR", "Azure Container Registry"),
        abbreviations=("acr", "cr"),
        icon_patterns=("container", "docker", "registry"),
        text_patterns=compile_patterns(
            r"container\s*registry",
            r"\bacr\b",
            r"docker\s*registry",
            r"azure\s*container\s*registry",
        ),
        properties=PropertyHints(
            tier=("Basic", "Standard", "Premium"),
            pricing=("Per GB stored", "Per operation"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=(
                "kubernetes-service",
                "container-instances",
                "app-service",
            ),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
    ServiceDefinition(
        id="kubernetes-service",
        display_name="Kubernetes Service",
        category="Containers",
        resource_type="Microsoft.ContainerService/managedClusters",
        keywords=(
            "kubernetes",
            "aks",
            "k8s",
            "container orchestration",
            "managed kubernetes",
        ),
        aliases=("aks", "kubernetes", "k8s", "azure kubernetes"),
        common_names=("AKS", "Kubernetes Service", "Azure Kubernetes Service", "K8s"),
        abbreviations=("aks", "k8s"),
        icon_patterns=("kubernetes", "k8s", "container", "orchestration"),
        text_patterns=compile_patterns(
            r"kubernetes",
            r"\baks\b",
            r"\bk8s\b",
            r"azure\s*kubernetes",
            r"managed\s*kubernetes",
        ),
        properties=PropertyHints(
            tier=("Free", "Standard"),
            pricing=("Cluster management free", "Node pool charges"),
        ),
        dependencies=ServiceDependencies(
            commonly_used_with=("container-registry", "virtual-network", "storage-account"),
        ),
        confidence=ConfidenceWeights(exact=1.0, keyword=0.95, pattern=0.9),
    ),
)
