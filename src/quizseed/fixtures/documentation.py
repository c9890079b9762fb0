"""
Documentation links for subcategories.

Sets ``documentation_url`` on every stored subcategory whose name has a
known reference page. Subcategories without a known page are left alone.
"""

from typing import Dict

from quizseed.seeding.batch import default_registry
from quizseed.seeding.upsert import Outcome
from quizseed.storage.models import Subcategory

DOCUMENTATION_URLS: Dict[str, str] = {
    # Symfony
    'Architecture': 'https://symfony.com/doc/current/introduction/symfony_architecture.html',
    'Controllers': 'https://symfony.com/doc/current/controller.html',
    'Routing': 'https://symfony.com/doc/current/routing.html',
    'Twig': 'https://twig.symfony.com/doc/3.x/',
    'Forms': 'https://symfony.com/doc/current/forms.html',
    'Validation': 'https://symfony.com/doc/current/validation.html',
    'Dependency Injection': 'https://symfony.com/doc/current/service_container.html',
    'Services': 'https://symfony.com/doc/current/service_container.html',
    'Security': 'https://symfony.com/doc/current/security.html',
    'PasswordHasher': 'https://symfony.com/doc/current/security/passwords.html',
    'Console': 'https://symfony.com/doc/current/console.html',
    'Testing': 'https://symfony.com/doc/current/testing.html',
    'Event Dispatcher': 'https://symfony.com/doc/current/event_dispatcher.html',
    'Serializer': 'https://symfony.com/doc/current/serializer.html',
    'Messenger': 'https://symfony.com/doc/current/messenger.html',
    'Mailer': 'https://symfony.com/doc/current/mailer.html',
    'Translation': 'https://symfony.com/doc/current/translation.html',
    'Cache': 'https://symfony.com/doc/current/cache.html',
    'HTTP': 'https://symfony.com/doc/current/introduction/http_fundamentals.html',
    'HttpFoundation': 'https://symfony.com/doc/current/components/http_foundation.html',
    'HttpKernel': 'https://symfony.com/doc/current/components/http_kernel.html',
    'Configuration': 'https://symfony.com/doc/current/configuration.html',
    'PropertyAccess': 'https://symfony.com/doc/current/components/property_access.html',
    'Filesystem': 'https://symfony.com/doc/current/components/filesystem.html',
    'Clock': 'https://symfony.com/doc/current/components/clock.html',
    'Assets': 'https://symfony.com/doc/current/frontend/asset_mapper.html',
    'Doctrine': 'https://symfony.com/doc/current/doctrine.html',
    'Sessions': 'https://symfony.com/doc/current/session.html',
    'Request Handling': 'https://symfony.com/doc/current/introduction/http_fundamentals.html',
    'Attributes': 'https://symfony.com/doc/current/routing.html#creating-routes-as-attributes',
    'String': 'https://symfony.com/doc/current/components/string.html',
    'Workflow': 'https://symfony.com/doc/current/workflow.html',
    'Lock': 'https://symfony.com/doc/current/lock.html',
    'RateLimiter': 'https://symfony.com/doc/current/rate_limiter.html',
    'Scheduler': 'https://symfony.com/doc/current/scheduler.html',
    'Process': 'https://symfony.com/doc/current/components/process.html',
    'Expression Language': 'https://symfony.com/doc/current/components/expression_language.html',
    'Finder': 'https://symfony.com/doc/current/components/finder.html',
    'OptionsResolver': 'https://symfony.com/doc/current/components/options_resolver.html',
    'Yaml': 'https://symfony.com/doc/current/components/yaml.html',

    # PHP
    'OOP': 'https://www.php.net/manual/en/language.oop5.php',
    'PHP Basics': 'https://www.php.net/manual/en/langref.php',
    'Interfaces & Traits': 'https://www.php.net/manual/en/language.oop5.interfaces.php',
    'PSR': 'https://www.php-fig.org/psr/',
    'Namespaces': 'https://www.php.net/manual/en/language.namespaces.php',
    'Exceptions': 'https://www.php.net/manual/en/language.exceptions.php',
    'SPL': 'https://www.php.net/manual/en/book.spl.php',
    'Functions': 'https://www.php.net/manual/en/language.functions.php',
    'Arrays & Collections': 'https://www.php.net/manual/en/book.array.php',
    'Typing & Strict Types': 'https://www.php.net/manual/en/language.types.declarations.php',
    'Generators': 'https://www.php.net/manual/en/language.generators.php',
    'Enums': 'https://www.php.net/manual/en/language.enumerations.php',
    'Reflection': 'https://www.php.net/manual/en/book.reflection.php',
}


@default_registry.batch(name="subcategory_documentation", depends_on=["base"], groups=["documentation"])
def subcategory_documentation(context) -> None:
    """Attach reference documentation links to known subcategories."""
    updated = 0
    for subcategory in context.store.find_all_by(Subcategory):
        url = DOCUMENTATION_URLS.get(subcategory.name)
        if url is None:
            continue
        if subcategory.documentation_url != url:
            subcategory.documentation_url = url
            context.orchestrator.stats.record("subcategory", Outcome.UPDATED)
            updated += 1
        else:
            context.orchestrator.stats.record("subcategory", Outcome.UNCHANGED)

    context.logger.info(f"Updated documentation URLs for {updated} subcategories")
