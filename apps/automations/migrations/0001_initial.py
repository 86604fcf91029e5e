import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AutomationTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('message_template', models.TextField(help_text='Message body; supports {contact_name}, {deal_title}, ...')),
                ('send_to', models.CharField(choices=[('contact', 'Contact'), ('custom', 'Custom email')], default='contact', max_length=10)),
                ('custom_email', models.EmailField(blank=True, help_text='Recipient when sending to a custom email', max_length=254, null=True)),
                ('enabled', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='automation_templates', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Automation Template',
                'verbose_name_plural': 'Automation Templates',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['tenant', 'enabled'], name='template_tenant_enabled_idx')],
            },
        ),
    ]
