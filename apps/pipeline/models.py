from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction


class PipelineManager(models.Manager):

    def for_tenant(self, tenant):
        """The tenant's pipeline (one per tenant in the UI), or None."""
        return self.filter(tenant=tenant).order_by('created_at').first()

    @transaction.atomic
    def create_default(self, tenant):
        """
        Create the starter pipeline for a new tenant.

        Name and stages come from DEFAULT_PIPELINE_NAME and
        DEFAULT_PIPELINE_STAGES; stage positions follow list order.
        """
        pipeline = self.create(tenant=tenant, name=settings.DEFAULT_PIPELINE_NAME)

        Stage.objects.bulk_create([
            Stage(
                pipeline=pipeline,
                name=name,
                position=position,
                probability_percent=probability,
                is_won=is_won,
                is_lost=is_lost,
                color=Stage.default_color(is_won, is_lost),
            )
            for position, (name, probability, is_won, is_lost) in enumerate(settings.DEFAULT_PIPELINE_STAGES)
        ])
        return pipeline


class Pipeline(models.Model):

    tenant = models.ForeignKey('core.Tenant', on_delete=models.CASCADE, related_name='pipelines')
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = PipelineManager()

    class Meta:
        verbose_name = 'Pipeline'
        verbose_name_plural = 'Pipelines'
        ordering = ['created_at']

    def __str__(self):
        return self.name

    def get_stages(self):
        return self.stages.order_by('position', 'id')


class Stage(models.Model):

    pipeline = models.ForeignKey(Pipeline, on_delete=models.CASCADE, related_name='stages')
    name = models.CharField(max_length=100, help_text='Stage name (e.g. Qualified)')
    position = models.PositiveIntegerField(default=0, help_text='Column order on the board (lower = left)')
    probability_percent = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text='Chance a deal in this stage closes (used by the forecast)',
    )
    is_won = models.BooleanField(default=False, help_text='Deals here count as won')
    is_lost = models.BooleanField(default=False, help_text='Deals here count as lost')
    color = models.CharField(max_length=7, default='#667eea', help_text='Hex color code for UI display')

    class Meta:
        verbose_name = 'Stage'
        verbose_name_plural = 'Stages'
        ordering = ['position', 'id']
        indexes = [
            models.Index(fields=['pipeline', 'position'], name='stage_pipeline_position_idx'),
        ]

    def __str__(self):
        return self.name

    @staticmethod
    def default_color(is_won=False, is_lost=False):
        if is_won:
            return '#28a745'
        if is_lost:
            return '#dc3545'
        return '#667eea'

    @property
    def tenant_id(self):
        return self.pipeline.tenant_id

    @property
    def is_closed(self):
        return self.is_won or self.is_lost

    def clean(self):
        if self.is_won and self.is_lost:
            raise ValidationError('A stage cannot be both won and lost')

    def get_automations(self):
        """StageAutomation rows in delivery order."""
        return self.automations.select_related('template').order_by('position', 'id')


class StageAutomation(models.Model):
    """Ordered link between a stage and an automation template."""

    stage = models.ForeignKey(Stage, on_delete=models.CASCADE, related_name='automations')
    template = models.ForeignKey('automations.AutomationTemplate', on_delete=models.CASCADE, related_name='stage_automations')
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Stage Automation'
        verbose_name_plural = 'Stage Automations'
        ordering = ['position', 'id']
        constraints = [
            models.UniqueConstraint(fields=['stage', 'template'], name='unique_stage_template'),
        ]

    def __str__(self):
        return f"{self.stage.name} → {self.template.name}"
